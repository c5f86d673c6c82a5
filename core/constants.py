# ---------- constants.py ----------
"""Project-wide constants and labels."""
from typing import Dict, List, Tuple

DEFAULT_CATEGORIES: List[str] = [
    "Celulares",
    "Notebooks",
    "Tablets",
    "TVs e Áudio",
    "Acessórios",
    "Outros",
]

# status value -> (label, badge color)
SALE_STATUSES: Dict[str, Tuple[str, str]] = {
    "pendente": ("Pendente", "#FACC15"),
    "enviado": ("Enviado", "#3B82F6"),
    "entregue": ("Entregue", "#22C55E"),
    "cancelado": ("Cancelado", "#EF4444"),
}
DEFAULT_SALE_STATUS = "pendente"

CUSTOMER_STATUSES: Dict[str, Tuple[str, str]] = {
    "ativo": ("Ativo", "#22C55E"),
    "inativo": ("Inativo", "#9CA3AF"),
}

PAYMENT_METHODS: List[str] = [
    "Dinheiro",
    "Pix",
    "Cartão de Débito",
    "Cartão de Crédito",
    "A Prazo",
]

LOW_STOCK_THRESHOLD_DEFAULT: int = 5
CRITICAL_STOCK_THRESHOLD: int = 2

MONTH_LABELS: List[str] = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]

# Tried in order; the first pattern that yields a valid calendar date wins.
DATE_FORMATS: List[str] = ["%d/%m/%Y", "%d-%m-%Y", "%Y-%m-%d", "%Y/%m/%d"]
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

# (column, header) pairs for sale exports
SALE_EXPORT_COLUMNS: List[Tuple[str, str]] = [
    ("id", "ID"),
    ("customer", "Cliente"),
    ("date", "Data"),
    ("products", "Produtos"),
    ("status", "Status"),
    ("total", "Total"),
]

CHART_COLORS: List[str] = ["#3B82F6", "#4ADE80", "#FB923C", "#A855F7", "#F87171"]

# Sidebar menu labels (keep in sync across app and sidebar)
MENU_DASHBOARD = "\U0001F4C8 Dashboard"
MENU_INVENTORY = "\U0001F4E6 Inventário"
MENU_SALES = "\U0001F6D2 Vendas"
MENU_CUSTOMERS = "\U0001F465 Clientes"
MENU_REPORTS = "\U0001F4CA Relatórios"
MENU_SETTINGS = "⚙️ Configurações"
