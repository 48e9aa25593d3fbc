"""Fixed size limits applied to every event before it leaves the process."""

MAX_DEPTH = 10
MAX_BREADTH = 100
MAX_STRING_LENGTH = 32_768
MAX_EVENT_BYTES = 102_400

MAX_USER_INTENT_LENGTH = 2_048
MAX_ERROR_MESSAGE_LENGTH = 2_048
MAX_RESOURCE_NAME_LENGTH = 256
MAX_METADATA_LENGTH = 256
MAX_STACK_FRAMES = 50
MAX_CONTENT_TEXT_LENGTH = 32_768

# Strings shorter than this are never tested against the base64 pattern.
BASE64_SIZE_GATE = 10_240

# Largest integer a JSON consumer can represent exactly as a double.
MAX_SAFE_INTEGER = 2**53 - 1

TRUNCATION_SUFFIX = "..."
