# Environment variables
ENV_PREFIX = "RESTLINE_"
ENV_BASE_URL = "RESTLINE_BASE_URL"
ENV_ACCESS_TOKEN = "RESTLINE_ACCESS_TOKEN"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Logging
LOGGER_NAME = "restline"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
