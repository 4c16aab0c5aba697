from __future__ import annotations

from html import escape

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
      font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      min-height: 100vh; display: flex; justify-content: center;
      align-items: center; padding: 20px;
    }}
    .container {{
      background: white; padding: 50px 40px; border-radius: 20px;
      box-shadow: 0 20px 60px rgba(0, 0, 0, 0.3); max-width: 500px; text-align: center;
    }}
    h1 {{ color: #333; margin-bottom: 15px; font-size: 28px; font-weight: 600; }}
    p {{ color: #666; line-height: 1.8; margin-bottom: 30px; font-size: 16px; }}
    .buttons {{ display: flex; gap: 15px; justify-content: center; flex-wrap: wrap; }}
    .btn {{
      padding: 15px 35px; color: white; text-decoration: none; border-radius: 50px;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      font-weight: bold; border: none; cursor: pointer; font-size: 16px;
    }}
    .btn-secondary {{ background: linear-gradient(135deg, #f093fb 0%, #f5576c 100%); }}
    .debug-info {{
      margin-top: 20px; padding: 15px; background: #f8f9fa; border-radius: 10px;
      font-size: 12px; color: #6c757d; border-left: 4px solid #667eea; text-align: left;
    }}
  </style>
</head>
<body>
  <div class="container">
    <h1>{title}</h1>
    <p>{message}</p>
    <div class="buttons">
      {retry}
      <a href="{portal_url}" class="btn btn-secondary">Back to Portal</a>
    </div>
    {debug}
  </div>
</body>
</html>
"""

_RETRY_BUTTON = '<button class="btn" onclick="location.reload()">Try Again</button>'


def render_error_page(
    title: str,
    message: str,
    portal_url: str,
    show_retry: bool = True,
    debug: str | None = None,
) -> str:
    """Render the browser-facing error page shown when issuance fails."""
    debug_html = (
        f'<div class="debug-info"><strong>Debug:</strong> {escape(debug)}</div>' if debug else ""
    )
    return _PAGE.format(
        title=escape(title),
        message=escape(message),
        portal_url=escape(portal_url, quote=True),
        retry=_RETRY_BUTTON if show_retry else "",
        debug=debug_html,
    )
