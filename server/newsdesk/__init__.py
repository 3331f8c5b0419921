"""
Newsdesk Service

Real-time financial news aggregation and fan-out.
Polls many independent RSS/REST sources, deduplicates and annotates each
story with a heuristic market-impact analysis, and pushes the resulting
cards plus live market-data snapshots to every connected client.

Architecture:
    feeds -> pipeline (dedup, recency) -> analysis -> ws_server (card store, broadcaster)

Components:
    - feeds: RSS / NewsAPI clients and the source poller pool
    - pipeline: dedup ledger, recency gates, card assembly
    - analysis: rule-driven annotation engine
    - ws_server: fan-out broadcaster and subscriber sessions
    - pubsub: optional Redis mirror of emitted cards
    - api: REST endpoints for manual input and on-demand analysis
"""
