# backend/routes/menu.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.menu import MenuItem
from models.users import User
from schemas.menu import MenuItemCreate, MenuItemUpdate, MenuItemOut, MenuPage
from utils.audit import client_ip, write_log
from utils.pricing import money
from utils.tokenJWT import staff_required

router = APIRouter(prefix="/menu", tags=["Menu"])

# Retrieve distinct menu categories
@router.get("/categories", response_model=list[str])
def get_categories(db: Session = Depends(get_db)):
    categories = db.query(MenuItem.category).distinct().filter(MenuItem.category != None).all()
    return sorted(c[0] for c in categories)

@router.get("", response_model=MenuPage)
def list_menu(
    q: Optional[str] = Query(None, description="Search by name or category"),
    category: Optional[str] = Query(None),
    include_unavailable: bool = Query(False),
    db: Session = Depends(get_db),
):
    query = db.query(MenuItem)
    if not include_unavailable:
        query = query.filter(MenuItem.is_available == True)
    if q:
        like = f"%{q}%"
        query = query.filter(or_(MenuItem.name.ilike(like), MenuItem.category.ilike(like)))
    if category:
        query = query.filter(MenuItem.category == category)

    items = query.order_by(MenuItem.category, MenuItem.name).all()
    return {"items": items, "total": len(items)}

@router.post("", response_model=MenuItemOut, status_code=201)
def create_menu_item(
    payload: MenuItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
):
    item = MenuItem(
        name=payload.name,
        description=payload.description,
        category=payload.category,
        price=money(payload.price),
        is_available=payload.is_available,
    )
    db.add(item)
    db.flush()
    write_log(db, action="MENU_CREATE", resource="menu", user_id=current_user.id, ip=client_ip(request),
              meta={"menu_item_id": item.id, "price": str(item.price)})
    db.refresh(item)
    return item

# Price changes apply to items added from now on; existing cart lines keep their snapshot
@router.patch("/{item_id}", response_model=MenuItemOut)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
):
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    changes = payload.model_dump(exclude_unset=True)
    if "price" in changes and changes["price"] is not None:
        changes["price"] = money(changes["price"])
    for field, value in changes.items():
        setattr(item, field, value)

    write_log(db, action="MENU_UPDATE", resource="menu", user_id=current_user.id, ip=client_ip(request),
              meta={"menu_item_id": item.id, "fields": sorted(changes)})
    db.refresh(item)
    return item
