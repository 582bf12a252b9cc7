from restsession.content import ContentType
from restsession.reporting import REPORT_MANAGER, ReportManager
from restsession.session import AttachmentMode, RequestSession
