# orderhub/product_service/main.py
"""
Dev mock of the product catalog, enough of its contract to run the order
service locally:  uvicorn orderhub.product_service.main:app --port 8001
"""
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    "p-1": {"id": "p-1", "name": "Red Lipstick", "price": 19.99, "stock": 25, "sellerId": "seller-1"},
    "p-2": {"id": "p-2", "name": "Mascara", "price": 24.50, "stock": 10, "sellerId": "seller-1"},
    "p-3": {"id": "p-3", "name": "Face Serum", "price": 42.00, "stock": 5, "sellerId": "seller-2"},
}


def _get_or_404(product_id: str) -> dict:
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.get("/products/{product_id}")
def get_product(product_id: str):
    return _get_or_404(product_id)


@app.get("/products/{product_id}/seller-id", response_class=PlainTextResponse)
def get_seller_id(product_id: str):
    return _get_or_404(product_id)["sellerId"]


@app.post("/products/{product_id}/reduce-stock")
def reduce_stock(product_id: str, quantity: int = Query(..., gt=0)):
    product = _get_or_404(product_id)
    if product["stock"] < quantity:
        raise HTTPException(status_code=400, detail="Insufficient stock")
    product["stock"] -= quantity
    return {"id": product_id, "stock": product["stock"]}


@app.post("/products/{product_id}/restore-stock")
def restore_stock(product_id: str, quantity: int = Query(..., gt=0)):
    product = _get_or_404(product_id)
    product["stock"] += quantity
    return {"id": product_id, "stock": product["stock"]}
