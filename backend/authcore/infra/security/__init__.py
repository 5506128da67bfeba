from .credential_verifier import WerkzeugCredentialVerifier

__all__ = ["WerkzeugCredentialVerifier"]
