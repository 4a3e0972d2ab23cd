"""
order_enrichment.api.routers

Route modules mounted by `order_enrichment.api.app`.
"""
