JSON_FORMAT = "json"
CSV_FORMAT = "csv"

GET_METHOD = "GET"
POST_METHOD = "POST"
PATCH_METHOD = "PATCH"
DELETE_METHOD = "DELETE"

SUPPORTED_METHODS = (POST_METHOD, PATCH_METHOD, GET_METHOD, DELETE_METHOD)

# methods whose form parameters travel in the query string
QUERY_PARAM_METHODS = (GET_METHOD, DELETE_METHOD)

ARGUMENT_SEPARATOR = "?"

AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"
SET_COOKIE_HEADER = "Set-Cookie"
XSRF_HEADER = "X-XSRF-TOKEN"
XSRF_COOKIE = "XSRF-TOKEN"

# response headers replayed on later requests of the same session
TRACKED_RESPONSE_HEADERS = (XSRF_HEADER, SET_COOKIE_HEADER)

BASIC_SCHEME = "Basic"
BEARER_SCHEME = "Bearer"
BEARER_TYPE_FIELD = "type"
BEARER_TOKEN_FIELD = "token"

JSON_MIME = "application/json"

PERFORM_REQUEST_ACTION = "perform_request"
RESPONSE_STEP_TITLE = "API Response"
RESPONSE_STEP_LABEL = "REST Body"
