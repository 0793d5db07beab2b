"""HTTP surface: the semantic-search function and public storage."""
