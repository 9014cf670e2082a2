"""MJML email templates"""

THEME = {
    "primary": "#111827",
    "accent": "#d97706",
    "background": "#f3f4f6",
    "text_primary": "#111827",
    "text_secondary": "#4b5563",
    "border": "#e5e7eb",
}


def password_reset_template(reset_link: str, expires_minutes: int) -> str:
    """Password reset MJML template"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>Reset Your Password</mj-title>
        <mj-preview>Reset your BarberFlow password</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 0 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="700" color="{THEME['text_primary']}">
              BarberFlow
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" />
          </mj-column>
        </mj-section>
        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column>
            <mj-text font-size="20px" font-weight="600" color="{THEME['text_primary']}">
              Reset your password
            </mj-text>
            <mj-text>
              We received a request to reset the password for your account.
              The link below is valid for {expires_minutes} minutes and can be used once.
            </mj-text>
            <mj-button href="{reset_link}" background-color="{THEME['accent']}" color="#ffffff"
                       border-radius="8px" font-weight="600" align="left">
              Reset Password
            </mj-button>
            <mj-text font-size="14px">
              If you didn't ask for this, you can ignore this email. Your password won't change.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """
