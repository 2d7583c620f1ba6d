"""Infrastructure layer: persistence strategies and health diagnostics.

- **database**: models, engines, connection providers and one repository
  implementation per data access technology
- **health**: health checkers and the aggregating health service
"""
