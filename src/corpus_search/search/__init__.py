"""
Scan-and-score search engine over the three corpora.

Pipeline stages, leaf first:
- normalizer: source records -> uniform searchable records
- tokenizer: whitespace query tokenization
- filters: per-corpus filter predicates
- scoring: additive relevance scoring
- sorting: stable multi-key ordering
- governor: truncation, ranks and corpus-share statistics
- facets / suggestions: filter options and search-bar completions
"""
