"""Rule persistence: row codec, SQL builders, rule table, and policy store."""
