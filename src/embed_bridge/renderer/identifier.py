"""
Content identifier extraction for YouTube URLs.

Recognized shapes:
- http://www.youtube.com/watch?feature=player_embedded&v=yyWWXSwtPP0
- http://www.youtube.com/v/VIDEO_ID?version=3
- http://youtu.be/Djd6tPrxc08
"""

from typing import Optional


def extract_id_from_param(url: str) -> str:
    """
    Get the id from the `v` query parameter.

    Args:
        url: URL containing a query string

    Returns:
        Parameter value, or "" if there is no `v` parameter
    """
    query = url.split('?')[1]

    for parameter in query.split('&'):
        parts = parameter.split('=')
        if parts[0] == 'v':
            return parts[1] if len(parts) > 1 else ''

    return ''


def extract_id_from_path(url: Optional[str]) -> Optional[str]:
    """
    Get the id from the last path segment, ignoring any query string.

    Args:
        url: URL to parse

    Returns:
        Text after the last '/', or None if url is None
    """
    if url is None:
        return None

    path = url.split('?', 1)[0]
    return path[path.rfind('/') + 1:]


def extract_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the content id from a media URL.

    The `v` parameter wins when present; otherwise the final path segment
    is used. Identifier syntax is not validated.

    Args:
        url: Media reference URL

    Returns:
        Content id, or None for a None url
    """
    if url is None:
        return None

    if url.find('?') > 0:
        content_id = extract_id_from_param(url)
        if content_id == '':
            content_id = extract_id_from_path(url)
        return content_id

    return extract_id_from_path(url)
