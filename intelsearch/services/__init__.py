"""Search orchestration services.

- **query_builder** -- FilterState -> SearchRequest -> backend wire body.
- **result_normalizer** -- raw structured/vector hits -> result cards.
- **facet_aggregator** -- page-local facets and refinement suggestions.
- **search_service** -- primary provider with synthetic fallback.
- **reviews_service** / **reviews_mapping** -- saved searches, history and
  the hybrid-search schema.
- **mock_dataset** -- the immutable synthetic fixtures.
"""
