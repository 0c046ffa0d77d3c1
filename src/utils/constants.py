# app wide settings, every knob can be overridden through env vars
import os

API_BASE_URL = os.getenv("RESTRO_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("RESTRO_REQUEST_TIMEOUT", "10"))
STORAGE_PATH = os.getenv("RESTRO_STORAGE_PATH", "data/storage.sqlite")
CART_POLL_INTERVAL = float(os.getenv("RESTRO_CART_POLL_SECONDS", "5.0"))

APP_TITLE = "Restro"


class ROLES:
    ADMIN = "admin"
    EMPLOYEE = "employee"
    CUSTOMER = "customer"


class ROUTES:
    HOME = "/"
    LOGIN = "/login"
    MENU = "/menu"
    CART = "/cart"
    ORDERS = "/orders"
    EVENTS = "/events"
    PROFILE = "/profile"
    ADMIN_DASHBOARD = "/admin/dashboard"
    EMPLOYEE_DASHBOARD = "/employee/dashboard"


class STORAGE_KEYS:
    AUTH_TOKEN = "auth_token"
    USER_DATA = "user_data"
    GUEST_SESSION = "guest_session_id"
    THEME = "theme"


ORDER_TYPES = {
    "dine_in": "Dine In",
    "takeaway": "Takeaway",
    "delivery": "Delivery",
}

PAYMENT_METHODS = {
    "cash": "Cash",
    "card": "Card",
    "upi": "UPI",
    "wallet": "Wallet",
}

# server owned, the client only displays these
ORDER_STATUSES = {
    "pending": "Pending",
    "confirmed": "Confirmed",
    "preparing": "Preparing",
    "ready": "Ready",
    "served": "Served",
    "completed": "Completed",
    "cancelled": "Cancelled",
}

EVENT_TYPES = {
    "birthday": "Birthday",
    "anniversary": "Anniversary",
    "corporate": "Corporate",
    "wedding": "Wedding",
    "other": "Other",
}

EVENT_PACKAGES = ("Standard", "Premium", "Romantic")
