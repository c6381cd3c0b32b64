"""Core building blocks: errors, coercion, equality, rules, configuration."""
