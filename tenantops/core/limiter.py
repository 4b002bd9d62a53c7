"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. This is per-client HTTP throttling only;
the per-tenant / per-admin setup-link limits are enforced in the database
(SetupLinkStore.record_issue) so they hold across processes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Single source of truth for rate limit strings and decorators.
PROVISION_LIMIT = "10/minute"
SETUP_LINK_LIMIT = "30/minute"
LINK_VALIDATE_LIMIT = "60/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_provision = limiter.limit(PROVISION_LIMIT)
limit_setup_link = limiter.limit(SETUP_LINK_LIMIT)
limit_link_validate = limiter.limit(LINK_VALIDATE_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
