"""CareOps backend: multi-tenant operations API with a rule-based automation engine"""
