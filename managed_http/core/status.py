"""Translation of failure status codes into human-readable messages."""

ERROR_STATUS_MESSAGES: dict[int, str] = {
    400: "请求错误(400)",
    401: "未授权，请重新登录(401)",
    402: "拒绝访问(402)",
    404: "请求出错(404)",
    408: "请求超时(408)",
    500: "服务器错误(500)",
    501: "服务未实现(501)",
    502: "网络错误(502)",
    503: "服务不可用(503)",
    504: "网络超时(504)",
    505: "HTTP版本不受支持(505)",
}

CONTACT_SUFFIX = "，请检查网络或联系管理员！"


def translate_status(status_code: int) -> str:
    """Returns the message shown to users for a failed request with the given status code.

    Args:
        status_code: The HTTP status code of the failed response.

    Returns:
        The mapped message for well-known codes, or a generic message embedding the code.
    """
    message = ERROR_STATUS_MESSAGES.get(status_code)
    if message is None:
        return f"连接出错{status_code}{CONTACT_SUFFIX}"
    return f"{message}{CONTACT_SUFFIX}"
