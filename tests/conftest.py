"""Shared fixtures: a temporary SQLite store and product page builders."""

import json

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from preciazo.db.models import Base
from preciazo.db.store import ObservationStore
from preciazo.ingest.debug_bundle import DebugBundleWriter

IN_STOCK = "http://schema.org/InStock"
OUT_OF_STOCK = "http://schema.org/OutOfStock"

_MISSING = object()


@pytest.fixture
async def engine(tmp_path):
    """Async engine over a fresh SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory) -> ObservationStore:
    return ObservationStore(session_factory)


@pytest.fixture
def debug_writer(tmp_path) -> DebugBundleWriter:
    return DebugBundleWriter(base_path=tmp_path / "debug", enabled=True)


def _product_ld(name, image, offers) -> str:
    ld = {
        "@context": "https://schema.org/",
        "@type": "Product",
        "name": name,
        "image": image,
        "sku": "123",
    }
    if offers is not _MISSING:
        ld["offers"] = offers
    return json.dumps(ld)


def build_dia_page(
    ean="7790001",
    price="199.90",
    availability=IN_STOCK,
    name="Yerba Mate Suave 1 Kg",
    image="https://diaonline.supermercadosdia.com.ar/arquivos/ids/1/yerba.jpg",
    offers=_MISSING,
    ld_script=None,
    canonical="https://diaonline.supermercadosdia.com.ar/yerba-mate-suave-1-kg-7790001/p",
) -> str:
    """Render a Dia product page; pass ``None`` to drop a field."""
    metas = []
    if ean is not None:
        metas.append(f'<meta property="product:retailer_item_id" content="{ean}">')
    if price is not None:
        metas.append(f'<meta property="product:price:amount" content="{price}">')
        metas.append('<meta property="product:price:currency" content="ARS">')

    if offers is _MISSING:
        offers = {
            "@type": "AggregateOffer",
            "lowPrice": 199.9,
            "highPrice": 199.9,
            "priceCurrency": "ARS",
            "offers": [{"@type": "Offer", "price": 199.9, "availability": availability}],
        }
    if ld_script is None:
        ld_script = f'<script type="application/ld+json">{_product_ld(name, image, offers)}</script>'
    link = f'<link rel="canonical" href="{canonical}">' if canonical else ""

    return f"""<!DOCTYPE html>
<html lang="es">
<head>
  <meta charset="utf-8">
  <title>{name} - Dia</title>
  {link}
  {''.join(metas)}
  {ld_script}
</head>
<body>
  <div class="vtex-store-components-3-x-productNameContainer"><h1>{name}</h1></div>
</body>
</html>"""


def build_carrefour_page(
    ean="7791234567890",
    price="1234.50",
    availability="https://schema.org/InStock",
    name="Leche Entera La Serenísima 1 L",
    image="https://carrefourar.vtexassets.com/arquivos/ids/2/leche.jpg",
    canonical="https://www.carrefour.com.ar/leche-entera-la-serenisima-1-l/p",
) -> str:
    spec_row = ""
    if ean is not None:
        spec_row = (
            '<tr><td class="vtex-store-components-3-x-specificationItemProperty" '
            'data-specification="EAN">EAN</td>\n'
            f'<td class="vtex-store-components-3-x-specificationItemSpecifications">{ean}</td></tr>'
        )
    price_meta = f'<meta property="product:price:amount" content="{price}">' if price is not None else ""
    offers = {"@type": "AggregateOffer", "offers": [{"@type": "Offer", "availability": availability}]}
    return f"""<html><head>
<link rel="canonical" href="{canonical}">
{price_meta}
<script type="application/ld+json">{_product_ld(name, [image], offers)}</script>
</head><body>
<table><tbody>
<tr><td data-specification="Marca">Marca</td><td>La Serenísima</td></tr>
{spec_row}
</tbody></table>
</body></html>"""


def build_coto_page(
    ean="7790060023684",
    price="$1.234,56",
    available=True,
    name="Aceite De Girasol Cocinero 1.5 Lt",
    image="https://static.cotodigital3.com.ar/sitios/fotos/full/00012300/00012345.jpg",
    canonical="https://www.cotodigital3.com.ar/sitios/cdigi/producto/-aceite-de-girasol-cocinero/_/R-00012345-00012345-200",
) -> str:
    brand = "<span>COCINERO</span>"
    if ean is not None:
        brand += f' | <span class="span_codigoplu">EAN: {ean}</span>'
    price_html = f'<span class="atg_store_newPrice">\n  {price}\n</span>' if price is not None else ""
    unavailable = "" if available else '<div class="product_not_available">Producto sin stock</div>'
    return f"""<html><head><link rel="canonical" href="{canonical}"></head>
<body>
<div class="zoom"><img src="{image}" alt=""></div>
<h1 class="product_page">
  {name}
</h1>
<div id="brandText">{brand}</div>
<div class="info_productPrice">{price_html}</div>
{unavailable}
</body></html>"""


@pytest.fixture
def dia_page():
    return build_dia_page


@pytest.fixture
def carrefour_page():
    return build_carrefour_page


@pytest.fixture
def coto_page():
    return build_coto_page
