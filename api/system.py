# api/system.py

import logging
from fastapi import APIRouter, HTTPException, Request

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health")
async def health_check():
    return {"status": "ok"}

@router.get("/api/shopify/test")
async def test_shopify_connection(request: Request):
    try:
        shopify_client = request.app.state.shopify

        # Minimal query to confirm API connectivity
        shop_info = await shopify_client.get_shop()

        return {
            "success": True,
            "shop": {
                "name": shop_info.get("name"),
                "domain": (shop_info.get("primaryDomain") or {}).get("host"),
                "myshopify_domain": shop_info.get("myshopifyDomain"),
            },
        }

    except Exception as e:
        logger.error(f"Shopify test connection failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Unable to reach Shopify API")
