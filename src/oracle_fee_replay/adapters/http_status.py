RETRY_STATUSES = {403, 407, 429, 500, 502, 503, 504}
