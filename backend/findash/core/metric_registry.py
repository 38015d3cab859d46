"""
metric_registry.py — Quarterly metric definitions and unit mappings.

Defines every numeric field of a quarterly financial record together with its
display title, dashboard category and display unit. The dashboard, the
formatters and the indicator-definition defaults all read from here, so a new
metric is added with a single entry in METRIC_REGISTRY.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

# Display units
UNIT_CURRENCY = "currency"
UNIT_PERCENTAGE = "percentage"
UNIT_RATIO = "ratio"

UNITS = (UNIT_CURRENCY, UNIT_PERCENTAGE, UNIT_RATIO)

# Dashboard categories (in display order)
CATEGORY_REVENUE = "revenue"
CATEGORY_CASH_FLOW = "cash_flow"
CATEGORY_DEBT = "debt"
CATEGORY_LIQUIDITY = "liquidity"
CATEGORY_PROFITABILITY = "profitability"
CATEGORY_RETURNS = "returns"

CATEGORIES = (
    CATEGORY_REVENUE,
    CATEGORY_CASH_FLOW,
    CATEGORY_DEBT,
    CATEGORY_LIQUIDITY,
    CATEGORY_PROFITABILITY,
    CATEGORY_RETURNS,
)

CATEGORY_LABELS: Dict[str, str] = {
    CATEGORY_REVENUE: "Receita",
    CATEGORY_CASH_FLOW: "Fluxo de Caixa",
    CATEGORY_DEBT: "Endividamento",
    CATEGORY_LIQUIDITY: "Liquidez",
    CATEGORY_PROFITABILITY: "Rentabilidade",
    CATEGORY_RETURNS: "Retornos",
}


@dataclass(frozen=True)
class MetricDefinition:
    field_name: str
    title: str
    category: str
    unit: str
    description: str = ""


METRIC_REGISTRY: Dict[str, MetricDefinition] = {
    m.field_name: m
    for m in [
        # Revenue and operational
        MetricDefinition(
            "receitas_bens_servicos", "Receitas de Bens e Serviços",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Receita total da empresa com vendas de bens e serviços",
        ),
        MetricDefinition(
            "custo_receita_operacional", "Custo da Receita Operacional",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Custos diretos relacionados às receitas operacionais",
        ),
        MetricDefinition(
            "despesas_operacionais_total", "Despesas Operacionais - Total",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Despesas relacionadas às operações da empresa",
        ),
        MetricDefinition(
            "lucro_operacional_antes_receita_despesa_nao_recorrente",
            "Lucro Operacional antes da Receita/Despesa Não Recorrente",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Lucro operacional excluindo itens não recorrentes",
        ),
        MetricDefinition(
            "lucro_liquido_apos_impostos", "Lucro Líquido após Impostos",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Lucro final após todos os impostos e deduções",
        ),
        MetricDefinition(
            "lucro_por_acao", "Lucro por Ação",
            CATEGORY_REVENUE, UNIT_CURRENCY,
            "Lucro líquido dividido pelo número de ações",
        ),
        # Cash flow
        MetricDefinition(
            "caixa_equivalentes_caixa", "Caixa e Equivalentes de Caixa",
            CATEGORY_CASH_FLOW, UNIT_CURRENCY,
        ),
        MetricDefinition(
            "fluxo_caixa_liquido_atividades_operacionais",
            "Fluxo de caixa líquido das atividades operacionais",
            CATEGORY_CASH_FLOW, UNIT_CURRENCY,
        ),
        MetricDefinition(
            "variacao_liquida_caixa_total", "Variação líquida de Caixa Total",
            CATEGORY_CASH_FLOW, UNIT_CURRENCY,
        ),
        # Working capital and debt
        MetricDefinition(
            "capital_giro", "Capital de Giro",
            CATEGORY_DEBT, UNIT_CURRENCY,
            "Ativo circulante menos passivo circulante",
        ),
        MetricDefinition(
            "endividamento_total", "Endividamento total",
            CATEGORY_DEBT, UNIT_CURRENCY,
        ),
        MetricDefinition(
            "percentual_divida_total_ativo_total",
            "Percentual da dívida total do ativo total",
            CATEGORY_DEBT, UNIT_PERCENTAGE,
        ),
        # Liquidity
        MetricDefinition(
            "liquidez_geral", "Liquidez Geral",
            CATEGORY_LIQUIDITY, UNIT_RATIO,
            "Ativo total dividido pelo passivo total",
        ),
        MetricDefinition(
            "liquidez_corrente", "Liquidez Corrente",
            CATEGORY_LIQUIDITY, UNIT_RATIO,
            "Ativo circulante dividido pelo passivo circulante",
        ),
        # Profitability
        MetricDefinition("ebit", "EBIT", CATEGORY_PROFITABILITY, UNIT_CURRENCY),
        MetricDefinition("ebitda", "EBITDA", CATEGORY_PROFITABILITY, UNIT_CURRENCY),
        MetricDefinition(
            "margem_ebitda_percent", "Margem EBITDA %",
            CATEGORY_PROFITABILITY, UNIT_PERCENTAGE,
        ),
        MetricDefinition(
            "margem_lucro_bruto_percent", "Margem de lucro bruto %",
            CATEGORY_PROFITABILITY, UNIT_PERCENTAGE,
        ),
        MetricDefinition(
            "margem_operacional_percent", "Margem operacional %",
            CATEGORY_PROFITABILITY, UNIT_PERCENTAGE,
        ),
        MetricDefinition(
            "margem_liquida_percent", "Margem líquida %",
            CATEGORY_PROFITABILITY, UNIT_PERCENTAGE,
        ),
        # Returns
        MetricDefinition("roic", "ROIC", CATEGORY_RETURNS, UNIT_PERCENTAGE),
        MetricDefinition("roe", "ROE", CATEGORY_RETURNS, UNIT_PERCENTAGE),
        MetricDefinition("roa", "ROA", CATEGORY_RETURNS, UNIT_PERCENTAGE),
        MetricDefinition("dividend_yield", "Dividend Yield", CATEGORY_RETURNS, UNIT_PERCENTAGE),
    ]
}

METRIC_FIELDS: List[str] = list(METRIC_REGISTRY)


def get_metric(field_name: str) -> Optional[MetricDefinition]:
    return METRIC_REGISTRY.get(field_name)


def unit_for(field_name: str) -> str:
    """
    Display unit of a metric field.

    Fields that are not registered default to currency.
    """
    metric = METRIC_REGISTRY.get(field_name)
    if metric is None:
        return UNIT_CURRENCY
    return metric.unit


def title_for(field_name: str) -> str:
    metric = METRIC_REGISTRY.get(field_name)
    return metric.title if metric else field_name


def fields_for_category(category: str) -> List[str]:
    """Registered fields of a category, in registry order."""
    return [m.field_name for m in METRIC_REGISTRY.values() if m.category == category]
