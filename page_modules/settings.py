"""Settings page: store profile and notification preferences."""
import streamlit as st

from core.services import SETTINGS, save_settings
from ui.components import query_data, run_mutation

NOTIFICATIONS = {
    "notify_low_stock": ("Estoque baixo", "Receber alertas quando produtos estiverem com estoque baixo."),
    "notify_new_order": ("Novos pedidos", "Receber notificações de novos pedidos."),
    "notify_sales_report": ("Relatório de vendas", "Receber relatórios periódicos de vendas."),
    "notify_product_updates": ("Atualizações de produtos", "Receber notificações sobre alterações de produtos."),
}


def render(gateway, queries):
    """Render the settings page."""
    st.header("⚙️ Configurações")
    current = query_data(queries.get(SETTINGS), "configurações")
    if current is None:
        return

    tab_store, tab_notifications = st.tabs(["Loja", "Notificações"])
    with tab_store:
        with st.form("store_settings_form"):
            name = st.text_input("Nome da Loja", value=current["store_name"])
            col1, col2 = st.columns(2)
            email = col1.text_input("E-mail", value=current["store_email"])
            phone = col2.text_input("Telefone", value=current["store_phone"])
            address = st.text_input("Endereço", value=current["store_address"])
            submitted = st.form_submit_button("\U0001F4BE Salvar Configurações")
        if submitted and run_mutation(
            lambda: save_settings(
                gateway,
                {
                    **current,
                    "store_name": name,
                    "store_email": email,
                    "store_phone": phone,
                    "store_address": address,
                },
                queries=queries,
            ),
            "As configurações da loja foram atualizadas com sucesso.",
        ):
            st.rerun()

    with tab_notifications:
        with st.form("notification_settings_form"):
            toggles = {
                key: st.toggle(label, value=bool(current[key]), help=help_text)
                for key, (label, help_text) in NOTIFICATIONS.items()
            }
            submitted = st.form_submit_button("\U0001F4BE Salvar Preferências")
        if submitted and run_mutation(
            lambda: save_settings(gateway, {**current, **toggles}, queries=queries),
            "Suas preferências de notificação foram salvas com sucesso.",
        ):
            st.rerun()
