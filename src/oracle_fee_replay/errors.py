class SubgraphRequestError(RuntimeError):
    pass

class OracleRequestError(RuntimeError):
    pass

class FatalRetrievalError(RuntimeError):
    """Retrieval cannot succeed by trying again; aborts the whole run."""
    pass

class PoolNotFoundError(FatalRetrievalError):
    """Subgraph returned no pool for the configured id."""
    pass

class PermanentHTTPError(FatalRetrievalError):
    pass

class RetriesExhaustedError(FatalRetrievalError):
    pass

class MalformedRecordError(RuntimeError):
    """A retrieved record carries numeric fields we refuse to coerce."""
    pass
