"""
Business services for Angkot Ledger.

- pricing.py: fare policy for single and round trips
- roster.py: driver and passenger registration
- ledger.py: transactional upsert of daily departure/return legs
- report.py: daily per-driver report
- session.py: per-chat prompt state in DynamoDB
- commands.py: chat command dispatcher
- backup.py: admin-only JSON export to S3
- migration.py: Alembic migrations
"""

__all__: list[str] = []
