from datetime import datetime, timezone

from sqlalchemy.orm import Session

from EquipTrack.database.models import StorageItem


# 1. Get a stored item by key
def get_item(db: Session, key: str):
    return db.query(StorageItem).filter(StorageItem.key == key).first()


# 2. Get the stored string value (None when the key was never written)
def get_value(db: Session, key: str):
    item = get_item(db, key)
    if not item:
        return None
    return item.value


# 3. Insert or replace the value for a key
def set_value(db: Session, key: str, value: str):
    item = get_item(db, key)
    if item is None:
        item = StorageItem(key=key, value=value)
        db.add(item)
    else:
        item.value = value
        item.updated_at = datetime.now(timezone.utc)

    db.flush()
    return item


# 4. Remove a key (no-op when missing)
def remove_item(db: Session, key: str):
    item = get_item(db, key)
    if not item:
        return False

    db.delete(item)
    db.flush()
    return True


# 5. List all stored keys
def get_all_keys(db: Session):
    return [row.key for row in db.query(StorageItem.key).order_by(StorageItem.key).all()]
