"""Inventory page: product list, add/edit/delete and categories."""
import streamlit as st

from core.formatters import format_currency
from core.services import (
    CATEGORIES,
    PRODUCTS,
    create_category,
    create_product,
    delete_category,
    delete_product,
    update_product,
)
from core.validators import CategoryForm, ProductForm
from ui.components import query_data, render_products_table, row_label, run_mutation, search_filter


def _product_fields(categories, prefix: str, initial: ProductForm) -> ProductForm:
    """Render the product fields inside a form and return what was typed."""
    cat_ids = [str(i) for i in categories["id"]]
    cat_names = dict(zip(cat_ids, categories["name"]))
    index = cat_ids.index(initial.category_id) if initial.category_id in cat_ids else None

    name = st.text_input("Nome do Produto", value=initial.name, placeholder="ex: iPhone 13 Pro", key=f"{prefix}_name")
    category_id = st.selectbox(
        "Categoria",
        cat_ids,
        index=index,
        format_func=lambda i: cat_names.get(i, i),
        placeholder="Selecione uma categoria",
        key=f"{prefix}_category",
    )
    col1, col2 = st.columns(2)
    price = col1.text_input(
        "Preço",
        value=initial.price,
        placeholder="ex: R$ 1.999,00",
        help="Os dígitos são lidos como centavos: 5000 vira R$ 50,00.",
        key=f"{prefix}_price",
    )
    stock = col2.text_input("Quantidade em Estoque", value=initial.stock, placeholder="ex: 10", key=f"{prefix}_stock")
    col1, col2, col3 = st.columns(3)
    width = col1.text_input("Largura (cm)", value=initial.width, placeholder="ex: 10", key=f"{prefix}_width")
    height = col2.text_input("Altura (cm)", value=initial.height, placeholder="ex: 5", key=f"{prefix}_height")
    weight = col3.text_input("Peso (kg)", value=initial.weight, placeholder="ex: 0.50", key=f"{prefix}_weight")
    description = st.text_area("Descrição (opcional)", value=initial.description, key=f"{prefix}_description")
    return ProductForm(
        name=name,
        category_id=category_id or "",
        price=price,
        stock=stock,
        width=width,
        height=height,
        weight=weight,
        description=description,
    )


def _add_product(gateway, queries, categories):
    with st.form("add_product_form", clear_on_submit=True):
        form = _product_fields(categories, "new", ProductForm())
        submitted = st.form_submit_button("\U0001F4E6 Adicionar Produto")
    if submitted and run_mutation(
        lambda: create_product(gateway, form.masked(), queries=queries),
        f"{form.name.strip()} foi adicionado ao inventário.",
    ):
        st.rerun()


def _edit_product(gateway, queries, products, categories):
    if products.empty:
        st.info("Nenhum produto para editar")
        return
    labels = {row_label(row, "name", "category"): row for _, row in products.iterrows()}
    selected = st.selectbox("Selecionar produto", list(labels), index=None, placeholder="Busque ou selecione")
    if not selected:
        return
    row = labels[selected]
    with st.form(f"edit_product_form_{row['id']}"):
        form = _product_fields(categories, f"edit_{row['id']}", ProductForm.from_row(row))
        col_save, col_delete = st.columns([3, 1])
        saved = col_save.form_submit_button("\U0001F4BE Salvar Alterações")
        confirm = col_delete.checkbox("Confirmar exclusão", key=f"confirm_del_{row['id']}")
        deleted = col_delete.form_submit_button("\U0001F5D1️ Excluir")
    if saved and run_mutation(
        lambda: update_product(gateway, row["id"], form.masked(), queries=queries),
        "As alterações foram salvas com sucesso!",
        icon="\U0001F4BE",
    ):
        st.rerun()
    if deleted:
        if not confirm:
            st.warning(f"Marque 'Confirmar exclusão' para remover '{row['name']}'.")
        elif run_mutation(
            lambda: delete_product(gateway, row["id"], queries=queries),
            "O produto foi removido com sucesso!",
            icon="\U0001F5D1️",
        ):
            st.rerun()


def _manage_categories(gateway, queries, categories):
    with st.form("add_category_form", clear_on_submit=True):
        new_name = st.text_input("Nova categoria", placeholder="Nome da categoria")
        submitted = st.form_submit_button("➕ Adicionar")
    if submitted and run_mutation(
        lambda: create_category(gateway, CategoryForm(new_name), categories["name"], queries=queries),
        f'A categoria "{new_name.strip()}" foi adicionada com sucesso.',
    ):
        st.rerun()

    for _, cat in categories.iterrows():
        col_name, col_del = st.columns([5, 1])
        col_name.write(cat["name"])
        if col_del.button("\U0001F5D1️", key=f"del_cat_{cat['id']}") and run_mutation(
            lambda cat_id=cat["id"]: delete_category(gateway, cat_id, queries=queries),
            "Categoria excluída",
        ):
            # Products are refetched too so their category names stay current.
            queries.invalidate(PRODUCTS)
            st.rerun()


def render(gateway, queries):
    """Render the inventory page."""
    st.header("\U0001F4E6 Gerenciamento de Inventário")

    products = query_data(queries.get(PRODUCTS), "produtos")
    categories = query_data(queries.get(CATEGORIES), "categorias")
    if products is None or categories is None:
        return

    search = st.text_input("Buscar produtos...", placeholder="Nome, categoria ou SKU")
    filtered = search_filter(products, search, ["name", "category", "id"])
    render_products_table(filtered)
    if not filtered.empty:
        st.caption(
            f"{len(filtered)} produto(s) · valor em estoque "
            f"{format_currency(float((filtered['price'].astype(float) * filtered['stock']).sum()))}"
        )

    tab_add, tab_edit, tab_categories = st.tabs(["Adicionar", "Editar / Excluir", "Categorias"])
    with tab_add:
        if categories.empty:
            st.warning("Cadastre uma categoria antes de adicionar produtos.")
        else:
            _add_product(gateway, queries, categories)
    with tab_edit:
        _edit_product(gateway, queries, products, categories)
    with tab_categories:
        _manage_categories(gateway, queries, categories)
