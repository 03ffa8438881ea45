"""
Email package.

Modules:
- core: base ``send_email`` function (SMTP)
- invitations: alumni invitation email content
"""
