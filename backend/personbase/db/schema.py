"""Key-value store schema definitions"""

# Every piece of state is a JSON document under a string key
KV_TABLE = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,            -- JSON document
    updated_at DATETIME NOT NULL
)
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_kv_store_updated ON kv_store(updated_at DESC)"
]

ALL_TABLES = [
    KV_TABLE
]
