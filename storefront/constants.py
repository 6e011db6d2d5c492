ORDERS_COLLECTION = "orders"
PRODUCTS_COLLECTION = "products"

CREATED_AT_FIELD = "createdAt"
STATUS_FIELD = "status"

ORDER_INITIAL_STATUS = "Processing"

ADMIN_SECRET_HEADER = "x-admin-secret"
