SCHEMA_SQL = r"""
-- Stores (shops that sell chips)
CREATE TABLE IF NOT EXISTS stores (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL UNIQUE
);

-- Sales (one row = one chip sold)
CREATE TABLE IF NOT EXISTS sales (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),  -- ISO datetime (UTC)
  manual_month TEXT,                     -- optional YYYY-MM override

  -- Reporting period: the override when given, otherwise the month of created_at
  month TEXT GENERATED ALWAYS AS (COALESCE(NULLIF(manual_month, ''), substr(created_at, 1, 7))) VIRTUAL,

  chip_type TEXT NOT NULL,
  chip_number TEXT,
  size_cls TEXT,                         -- S / M / L
  size_digits TEXT,                      -- 5-char size code
  price_total REAL NOT NULL DEFAULT 0 CHECK (price_total >= 0),
  store_id INTEGER,
  note TEXT,

  FOREIGN KEY (store_id) REFERENCES stores(id)
);

CREATE INDEX IF NOT EXISTS idx_sales_created_at ON sales(created_at);
CREATE INDEX IF NOT EXISTS idx_sales_month ON sales(month);
CREATE INDEX IF NOT EXISTS idx_sales_store_id ON sales(store_id);
"""
