"""Classification of transport and HTTP outcomes into readable diagnostics."""

from dex_quoter.core.models import ErrorClassification

# Transport-level status tokens produced by the transport layer
TOKEN_TIMEOUT = "timeout"
TOKEN_PARSER_ERROR = "parsererror"
TOKEN_ERROR = "error"
TOKEN_ABORT = "abort"
TOKEN_NETWORK_ERROR = "network error"

HTTP_STATUS_DESCRIPTIONS: dict[int, str] = {
    # 3xx
    300: "Multiple Choices - Several resources available",
    301: "Moved Permanently - URL moved permanently",
    302: "Found - Temporary redirect",
    303: "See Other - Redirect with GET",
    304: "Not Modified - Use cached copy",
    307: "Temporary Redirect - Same method redirect",
    308: "Permanent Redirect - Same method redirect",
    # 4xx
    400: "Bad Request - Malformed request",
    401: "Unauthorized - Authentication required",
    402: "Payment Required - Payment needed",
    403: "Forbidden - Access denied",
    404: "Not Found - Resource does not exist",
    405: "Method Not Allowed - Wrong HTTP method",
    406: "Not Acceptable - Format not supported",
    407: "Proxy Authentication Required - Proxy auth needed",
    408: "Request Timeout - Server waited too long",
    409: "Conflict - Data conflict",
    410: "Gone - Resource removed",
    411: "Length Required - Content-Length header required",
    412: "Precondition Failed - If-* header check failed",
    413: "Payload Too Large - Request body too large",
    414: "URI Too Long - URL too long",
    415: "Unsupported Media Type - Body format not supported",
    416: "Range Not Satisfiable - Invalid range request",
    417: "Expectation Failed - Expect header failed",
    421: "Misdirected Request - Wrong target server",
    422: "Unprocessable Entity - Validation failed",
    423: "Locked - Resource locked",
    424: "Failed Dependency - Dependent request failed",
    425: "Too Early - Request replay risk",
    426: "Upgrade Required - Protocol upgrade required",
    428: "Precondition Required - Conditional request required",
    429: "Too Many Requests - Rate limited",
    431: "Request Header Fields Too Large - Headers too large",
    451: "Unavailable For Legal Reasons - Legally blocked",
    # 5xx
    500: "Internal Server Error - Server side failure",
    501: "Not Implemented - Endpoint not available",
    502: "Bad Gateway - Gateway or proxy failure",
    503: "Service Unavailable - Server busy or in maintenance",
    504: "Gateway Timeout - Upstream timed out",
    505: "HTTP Version Not Supported - Protocol version rejected",
    507: "Insufficient Storage - Server out of space",
    508: "Loop Detected - Server detected a loop",
    510: "Not Extended - Extension required",
    511: "Network Authentication Required - Network login required",
}

_STATUS_CLASSES = {
    2: "Unexpected success status",
    3: "Redirect",
    4: "Client error",
    5: "Server error",
}


def describe_http_status(code: int) -> str:
    """
    Describe an HTTP status code in one line.

    Parameters
    ----------
    code : int
        HTTP status code

    Returns
    -------
    str
        Description from the standard table, or a generic one named after
        the status class (e.g., 'HTTP 418 - Client error')

    """
    code = int(code)
    if code in HTTP_STATUS_DESCRIPTIONS:
        return HTTP_STATUS_DESCRIPTIONS[code]
    return f"HTTP {code} - {_STATUS_CLASSES.get(code // 100, 'Unexpected status')}"


def _is_success(status: int) -> bool:
    return 200 <= status < 300

def describe_failure(status_code: int | None, status_token: str | None) -> str:
    """
    Describe a failed transport call.

    Parameters
    ----------
    status_code : int | None
        HTTP status, None or 0 when no response was received
    status_token : str | None
        Transport-level token (e.g., 'timeout', 'parsererror')

    Returns
    -------
    str
        Short description of the failure

    Examples
    --------
    >>> describe_failure(200, "parsererror")
    'Parser Error (200)'
    >>> describe_failure(None, "timeout")
    'Request Timeout'

    """
    status = int(status_code or 0)
    token = (status_token or "").strip().lower()

    if token == TOKEN_TIMEOUT:
        return "Request Timeout"
    if _is_success(status):
        # A 2xx with a broken or empty body looks like success at the transport layer
        return f"Parser Error ({status})" if token == TOKEN_PARSER_ERROR else f"Transport Error ({status})"
    if status > 0:
        return describe_http_status(status)
    return f"Error: {status_token or 'unknown'}"


def status_tag(status_code: int | None) -> str:
    """Return the bracketed status tag used in failure messages."""
    status = int(status_code or 0)
    if status <= 0:
        return ""
    if _is_success(status):
        return f"[ERROR {status}]"
    return f"[HTTP {status}]"


def classify_failure(status_code: int | None, status_token: str | None) -> ErrorClassification:
    """
    Map a transport failure to its taxonomy label.

    Parameters
    ----------
    status_code : int | None
        HTTP status
    status_token : str | None
        Transport-level token

    Returns
    -------
    ErrorClassification
        TIMEOUT for timeouts, PARSE_ERROR for unparsable 2xx bodies,
        HTTP_ERROR otherwise

    """
    token = (status_token or "").strip().lower()
    if token == TOKEN_TIMEOUT:
        return ErrorClassification.TIMEOUT
    if _is_success(int(status_code or 0)) and token == TOKEN_PARSER_ERROR:
        return ErrorClassification.PARSE_ERROR
    return ErrorClassification.HTTP_ERROR


def format_failure_message(label: str, status_code: int | None, status_token: str | None) -> str:
    """
    Build the full diagnostic line for a failed call.

    Examples
    --------
    >>> format_failure_message("KYBER", 404, "error")
    'KYBER: [HTTP 404] Not Found - Resource does not exist'

    """
    tag = status_tag(status_code)
    description = describe_failure(status_code, status_token)
    return f"{label}: {tag} {description}" if tag else f"{label}: {description}"
