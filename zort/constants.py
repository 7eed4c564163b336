DEFAULT_BUCKET_SIZE = 64
DEFAULT_FAST_BUCKET_FRACTION = 50
DEFAULT_FAST_BUCKET_MEMORY = 8000.0
DEFAULT_SIZE_NODES = 32
DEFAULT_SIZE_MEMORY = 234000.0
DEFAULT_WATT_PER_CORE = 8.0
DEFAULT_CENTS_PER_KWH = 27.0
DEFAULT_CURRENCY = 'euro'

# status codes recorded in the zummary
STATUS_MEMORY_LIMIT = 2
STATUS_SATISFIABLE = 10
STATUS_UNSATISFIABLE = 20

solved_statuses = frozenset({STATUS_SATISFIABLE, STATUS_UNSATISFIABLE})

currency_symbols = {
  'euro': '€',
  'dollar': '$',
}

ZUMMARY_NAME = 'zummary'

SECONDS_PER_HOUR = 3600.0
