"""
Use cases for the TrainHub API.

Each service orchestrates repositories/adapters to implement the business
rules (signup, inventory updates, training lifecycle, uploads, barcode lookup).
Routers call these services instead of touching the stores directly.
"""
