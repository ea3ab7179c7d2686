"""HTML bodies for outgoing mail. Every interpolated value is escaped."""

from html import escape
from urllib.parse import quote

_STYLE = """
    body {{ font-family: 'Noto Sans JP', sans-serif; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: {color}; color: white; padding: 20px; text-align: center; }}
    .content {{ background: #f5f5f5; padding: 30px; }}
    .button {{
        display: inline-block;
        background: {color};
        color: white;
        padding: 12px 30px;
        text-decoration: none;
        border-radius: 5px;
        margin: 20px 0;
    }}
    .footer {{ text-align: center; padding: 20px; color: #666; }}
"""

_FOOTER = "<p>HankoSign Digital - デジタル判子システム</p>"


def _safe_url(url: str) -> str:
    return escape(quote(url, safe=":/?&=#%"))


def _layout(heading: str, content: str, color: str = "#D32F2F", footer_extra: str = "") -> str:
    return f"""
<!DOCTYPE html>
<html lang="ja">
<head>
  <meta charset="UTF-8">
  <style>{_STYLE.format(color=color)}</style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{heading}</h1></div>
    <div class="content">{content}</div>
    <div class="footer">{_FOOTER}{footer_extra}</div>
  </div>
</body>
</html>
"""


def password_reset_email(user_name: str, reset_url: str) -> str:
    return _layout(
        "パスワードリセット",
        f"""
      <p>{escape(user_name)}様</p>
      <p>パスワードリセットのリクエストを受け付けました。</p>
      <p>以下のボタンをクリックしてパスワードをリセットしてください。</p>
      <a href="{_safe_url(reset_url)}" class="button">パスワードをリセット</a>
      <p>このリンクは1時間後に無効になります。</p>
      <p>このリクエストに心当たりがない場合は、このメールを無視してください。</p>
        """,
    )


def contact_support_email(name: str, email: str, company: str, subject: str, message: str) -> str:
    company_row = (
        f'<tr><td style="padding: 8px; font-weight: bold;">会社名:</td>'
        f'<td style="padding: 8px;">{escape(company)}</td></tr>'
        if company else ""
    )
    return f"""
<!DOCTYPE html>
<html lang="ja">
<head><meta charset="UTF-8"></head>
<body style="font-family: 'Noto Sans JP', sans-serif;">
  <h2>新しいお問い合わせ</h2>
  <table style="border-collapse: collapse; width: 100%;">
    <tr><td style="padding: 8px; font-weight: bold;">お名前:</td><td style="padding: 8px;">{escape(name)}</td></tr>
    <tr><td style="padding: 8px; font-weight: bold;">メール:</td><td style="padding: 8px;">{escape(email)}</td></tr>
    {company_row}
    <tr><td style="padding: 8px; font-weight: bold;">件名:</td><td style="padding: 8px;">{escape(subject)}</td></tr>
  </table>
  <h3>お問い合わせ内容:</h3>
  <p style="white-space: pre-wrap;">{escape(message)}</p>
</body>
</html>
"""


def contact_confirmation_email(name: str, subject: str) -> str:
    return _layout(
        "お問い合わせ受付完了",
        f"""
      <p>{escape(name)}様</p>
      <p>お問い合わせいただきありがとうございます。</p>
      <p>担当者より2営業日以内にご連絡させていただきます。</p>
      <p><strong>件名:</strong> {escape(subject)}</p>
        """,
    )


def approval_request_email(user_name: str, document_title: str, document_url: str) -> str:
    return _layout(
        "承認依頼",
        f"""
      <p>{escape(user_name)}様</p>
      <p>以下の文書の承認をお願いいたします。</p>
      <p><strong>文書名:</strong> {escape(document_title)}</p>
      <a href="{_safe_url(document_url)}" class="button">文書を確認する</a>
      <p>期限内に承認または却下をお願いします。</p>
        """,
        footer_extra="<p>このメールは自動送信されています</p>",
    )


def document_completed_email(user_name: str, document_title: str, verification_url: str) -> str:
    return _layout(
        "文書承認完了",
        f"""
      <p>{escape(user_name)}様</p>
      <p>以下の文書の承認が完了しました。</p>
      <p><strong>文書名:</strong> {escape(document_title)}</p>
      <a href="{_safe_url(verification_url)}" class="button">検証ページを確認</a>
        """,
        color="#4CAF50",
    )
