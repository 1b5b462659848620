from nodeflow.security.credentials import ConnectionCredentialStore, derive_key

__all__ = ["ConnectionCredentialStore", "derive_key"]
