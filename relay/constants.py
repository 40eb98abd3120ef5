"""
relay/constants.py

Notification texts, event type tags and token field names used by the dispatcher.
User-facing strings must be referenced from this module.
"""

# ── Order created ────────────────────────────────────────────
ORDER_CREATED_TYPE: str = "order_created"
ORDER_CREATED_TITLE: str = "Nuevo pedido"
ORDER_CREATED_BODY: str = "{owner} agregó un pedido."
UNKNOWN_OWNER: str = "Alguien"

# ── Order updated ────────────────────────────────────────────
ORDER_UPDATED_TYPE: str = "order_updated"
ORDER_PAID_TITLE: str = "Pedido realizado"
ORDER_PAID_BODY: str = "Un pedido fue marcado como realizado."
ORDER_MODIFIED_TITLE: str = "Pedido modificado"
ORDER_MODIFIED_BODY: str = "Un pedido fue modificado."
ORDER_GENERIC_UPDATE_TITLE: str = "Pedido actualizado"
ORDER_GENERIC_UPDATE_BODY: str = "Se actualizó un pedido."

# ── Token documents ──────────────────────────────────────────
FCM_TOKEN_FIELD: str = "fcmToken"

# ── FCM limits ───────────────────────────────────────────────
FCM_MULTICAST_MAX_TOKENS: int = 500
