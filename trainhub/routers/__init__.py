"""
FastAPI routers grouped by domain (auth/users, trainings, uploads, barcode).

Each module exposes an APIRouter that ``trainhub.app`` includes. Services are
looked up on ``request.app.state``; routers never build stores themselves.
"""
