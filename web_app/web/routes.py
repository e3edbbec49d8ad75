"""Redirect route for short links."""

import html

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

router = APIRouter()

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>URL Not Found</title>
  <style>
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      display: flex;
      justify-content: center;
      align-items: center;
      height: 100vh;
      margin: 0;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
    }}
    .container {{ text-align: center; color: white; }}
    h1 {{ font-size: 3rem; margin: 0; }}
    p {{ font-size: 1.2rem; margin-top: 1rem; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>404</h1>
    <p>{message}</p>
  </div>
</body>
</html>
"""


def render_not_found(short_code: str) -> str:
    return NOT_FOUND_PAGE.format(
        message=f"Short URL '{html.escape(short_code)}' not found"
    )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, counting the click."""
    service = request.app.state.service
    
    original_url = await service.resolve(short_code)
    
    if not original_url:
        return HTMLResponse(
            content=render_not_found(short_code),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    
    # 302 so browsers keep coming back and every visit is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
