from tenant_loader.libs.http.upsert_client import UpsertClient, forwarded_headers

__all__ = ["UpsertClient", "forwarded_headers"]
