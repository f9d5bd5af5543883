"""Application layer – filters, cache, pagination, search state, query engine, mutations."""
