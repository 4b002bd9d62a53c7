"""tenantops: tenant provisioning and owner-credential service."""
