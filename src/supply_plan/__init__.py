"""Manufacturing planning engine: matrices, horizontal plans, RYG and safety stock."""
