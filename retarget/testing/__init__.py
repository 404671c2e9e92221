# Conformance fixture tooling
