"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Request logging
MAX_USER_AGENT_LENGTH = 200
MAX_REQUEST_ID_LENGTH = 128
MAX_CORRELATION_ID_LENGTH = 128

# Resource messages
PRODUCT_NOT_FOUND_MESSAGE = "Producto no Encontrado"
PRODUCT_DELETED_MESSAGE = "Producto Eliminado"
