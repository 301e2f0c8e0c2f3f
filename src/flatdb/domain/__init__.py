"""Domain layer: clauses, schemas, rows, codec and predicate evaluation."""
