"""Feature packages: cache, http_cache and database."""
