"""Users module: accounts, roles and revoked credentials."""
