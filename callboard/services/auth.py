"""
Credential verification for the request gate.

The board is protected by a shared URL key (?key=...) and, for scheduled
calls, a bearer token. The gate only talks to a verifier object, so a
different scheme can be injected into create_app() without touching routes.
"""
import hmac


def bearer_token(header):
    """Token from an 'Authorization: Bearer <token>' header value, else None."""
    if not header:
        return None
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def _matches(candidate, secret):
    if not candidate or not secret:
        return False
    return hmac.compare_digest(candidate.encode('utf-8'), secret.encode('utf-8'))


class CredentialVerifier:
    """Interface used by the gate. Denies everything by default."""

    def verify_key(self, key):
        return False

    def verify_bearer(self, token):
        return False


class SharedSecretVerifier(CredentialVerifier):
    """URL key compared to SECRET_URL_KEY, bearer token compared to CRON_SECRET."""

    def __init__(self, secret_key, cron_secret=None):
        self.secret_key = secret_key
        self.cron_secret = cron_secret

    def verify_key(self, key):
        return _matches(key, self.secret_key)

    def verify_bearer(self, token):
        return _matches(token, self.cron_secret)
