import enum
from datetime import date

from sqlalchemy import create_engine, event, Column, Integer, String, Date, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

import config
from log_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()


# --- ENUMS ---
class AssetStatus(str, enum.Enum):
    AVAILABLE = "Available"
    ASSIGNED = "Assigned"
    SCRAP_DAMAGE = "Scrap/Damage"
    SOLD = "Sold"
    OTHERS = "Others"
    # Older dashboards tracked scrap and damage separately
    SCRAP = "Scrap"
    DAMAGE = "Damage"


SCRAP_STATUSES = (AssetStatus.SCRAP_DAMAGE, AssetStatus.SCRAP, AssetStatus.DAMAGE)
STATUS_CHOICES = [
    AssetStatus.AVAILABLE, AssetStatus.ASSIGNED, AssetStatus.SCRAP_DAMAGE,
    AssetStatus.SOLD, AssetStatus.OTHERS
]


class AssetType(str, enum.Enum):
    LAPTOP = "Laptop"
    TABLET = "Tablet"
    DESKTOP = "Desktop"
    MONITOR = "Monitor"
    PHONE = "Phone"
    ACCESSORIES = "Accessories"
    SMARTPHONE = "Smartphone"

    @classmethod
    def parse(cls, label):
        """Case-insensitive lookup by label, None when nothing matches."""
        if isinstance(label, cls):
            return label
        wanted = str(label or "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


class Location(str, enum.Enum):
    MUMBAI_OFFICE = "Mumbai Office"
    HYDERABAD_WH = "Hyderabad WH"
    GHAZIABAD_WH = "Ghaziabad WH"
    BHIWANDI_WH = "Bhiwandi WH"
    PATIALA_WH = "Patiala WH"
    BANGALORE_OFFICE = "Bangalore Office"
    KOLKATA_WH = "Kolkata WH"
    TRICHY_WH = "Trichy WH"
    GURUGRAM_OFFICE = "Gurugram Office"
    INDORE_WH = "Indore WH"
    BANGALORE_WH = "Bangalore WH"
    JAIPUR_WH = "Jaipur WH"


# --- MODELS ---
class Asset(Base):
    __tablename__ = 'assets'
    # AUTOINCREMENT keeps deleted ids from being handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset_tag = Column(String)
    name = Column(String)
    asset_type = Column(String, nullable=False)
    brand = Column(String)
    model = Column(String)
    configuration = Column(String)
    serial_number = Column(String)
    employee_id = Column(String)
    assigned_to = Column(String)
    status = Column(String, nullable=False, default=AssetStatus.AVAILABLE.value)
    location = Column(String, nullable=False)
    assigned_date = Column(Date)

    def to_dict(self):
        return {
            "ID": self.id,
            "Asset ID": self.asset_tag,
            "Asset Name": self.name,
            "Asset Type": self.asset_type,
            "Brand": self.brand,
            "Model": self.model,
            "Configuration": self.configuration,
            "Serial Number": self.serial_number,
            "Employee ID": self.employee_id,
            "Employee Name": self.assigned_to,
            "Status": self.status,
            "Asset Location": self.location,
            "Assigned Date": self.assigned_date
        }


# Labels a field edit may touch, mapped to model columns
EDITABLE_FIELDS = {
    "Asset ID": "asset_tag",
    "Asset Name": "name",
    "Asset Type": "asset_type",
    "Brand": "brand",
    "Model": "model",
    "Configuration": "configuration",
    "Serial Number": "serial_number"
}

DISTINCT_FIELDS = {
    "Asset Type": Asset.asset_type,
    "Brand": Asset.brand,
    "Configuration": Asset.configuration,
    "Asset Location": Asset.location
}


def _text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


SEARCH_FOLD_FUNCTION = "casefold"


def _casefold(value):
    return value.casefold() if value is not None else None


def _clear_assignment(asset):
    asset.assigned_to = None
    asset.employee_id = None
    asset.assigned_date = None


def _register_functions(dbapi_connection, connection_record):
    dbapi_connection.create_function(SEARCH_FOLD_FUNCTION, 1, _casefold, deterministic=True)


# --- CONTROLLER ---
class Database:
    def __init__(self, url=None, seed=True, consistency_mode=None, require_employee_id=None, today=None):
        self.engine = create_engine(
            url or config.DB_URL,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool
        )
        # SQLite lower() only folds ASCII; search folds through Python instead
        event.listen(self.engine, "connect", _register_functions)
        Base.metadata.create_all(self.engine)
        self.Session = scoped_session(sessionmaker(bind=self.engine))
        self.consistency_mode = consistency_mode or config.CONSISTENCY_MODE
        if self.consistency_mode not in (config.CONSISTENCY_LEGACY, config.CONSISTENCY_STRICT):
            raise ValueError(f"Unknown consistency mode: {self.consistency_mode}")
        self.require_employee_id = config.REQUIRE_EMPLOYEE_ID if require_employee_id is None else require_employee_id
        self.today = today or date.today
        if seed:
            self.seed_assets()

    @property
    def strict(self):
        return self.consistency_mode == config.CONSISTENCY_STRICT

    def get_session(self):
        return self.Session()

    def seed_assets(self, records=None):
        session = self.get_session()
        try:
            for record in (config.SEED_ASSETS if records is None else records):
                assigned = record.get("Assigned Date")
                asset = Asset(
                    name=record["Asset Name"],
                    asset_type=AssetType(record["Asset Type"]).value,
                    brand=record["Brand"],
                    model=_text(record.get("Model")),
                    configuration=_text(record.get("Configuration")),
                    serial_number=record["Serial Number"],
                    employee_id=_text(record.get("Employee ID")),
                    assigned_to=_text(record.get("Employee Name")),
                    status=AssetStatus(record.get("Status") or AssetStatus.AVAILABLE).value,
                    location=Location(record.get("Asset Location") or config.DEFAULT_LOCATION).value,
                    assigned_date=date.fromisoformat(assigned) if isinstance(assigned, str) else assigned
                )
                session.add(asset)
                session.flush()
                asset.asset_tag = f"{config.ASSET_TAG_PREFIX}{asset.id:03d}"
            session.commit()
        except SQLAlchemyError:
            logger.exception("Seeding assets failed")
            session.rollback()
            raise
        finally:
            session.close()

    # --- ASSETS ---
    def add_asset(self, draft):
        session = self.get_session()
        try:
            asset_type = AssetType.parse(draft.get("Asset Type"))
            if asset_type is None:
                raise ValueError(f"Unknown asset type: {draft.get('Asset Type')!r}")
            asset = Asset(
                name=_text(draft.get("Asset Name")),
                asset_type=asset_type.value,
                brand=_text(draft.get("Brand")),
                model=_text(draft.get("Model")),
                configuration=_text(draft.get("Configuration")),
                serial_number=_text(draft.get("Serial Number")),
                status=AssetStatus.AVAILABLE.value,
                location=Location(config.DEFAULT_LOCATION).value
            )
            session.add(asset)
            session.flush()
            asset_id = asset.id
            asset.asset_tag = f"{config.ASSET_TAG_PREFIX}{asset_id:03d}"
            session.commit()
            logger.info("Created asset %s (%s)", asset_id, draft.get("Asset Name"))
            return asset_id
        except (SQLAlchemyError, ValueError):
            logger.exception("Could not create asset from draft %r", draft)
            session.rollback()
            return None
        finally:
            session.close()

    def _update(self, asset_id, action, change):
        """Run change(asset) on one record; False when missing or refused."""
        session = self.get_session()
        try:
            asset = session.get(Asset, asset_id)
            if not asset:
                logger.warning("%s ignored: asset %s not found", action, asset_id)
                return False
            if not change(asset):
                session.rollback()
                return False
            session.commit()
            logger.info("%s applied to asset %s", action, asset_id)
            return True
        except SQLAlchemyError:
            logger.exception("%s failed for asset %s", action, asset_id)
            session.rollback()
            return False
        finally:
            session.close()

    def assign(self, asset_id, employee_name, employee_id=None):
        name, emp_id = _text(employee_name), _text(employee_id)
        if not name:
            logger.warning("Assign ignored for asset %s: employee name is required", asset_id)
            return False
        if self.require_employee_id and not emp_id:
            logger.warning("Assign ignored for asset %s: employee ID is required", asset_id)
            return False

        def change(asset):
            asset.assigned_to = name
            asset.employee_id = emp_id
            asset.status = AssetStatus.ASSIGNED.value
            asset.assigned_date = self.today()
            return True

        return self._update(asset_id, "Assign", change)

    def unassign(self, asset_id):
        def change(asset):
            _clear_assignment(asset)
            asset.status = AssetStatus.AVAILABLE.value
            return True

        return self._update(asset_id, "Unassign", change)

    def update_status(self, asset_id, status):
        new_status = AssetStatus(status)

        def change(asset):
            if self.strict:
                if new_status is AssetStatus.ASSIGNED and not asset.assigned_to:
                    logger.warning("Status change refused for asset %s: no employee assigned", asset_id)
                    return False
                if new_status is not AssetStatus.ASSIGNED:
                    _clear_assignment(asset)
            asset.status = new_status.value
            return True

        return self._update(asset_id, "Status update", change)

    def update_location(self, asset_id, location):
        new_location = Location(location)

        def change(asset):
            asset.location = new_location.value
            return True

        return self._update(asset_id, "Location update", change)

    def update_fields(self, asset_id, changes):
        values = {}
        for label, value in changes.items():
            if label not in EDITABLE_FIELDS:
                continue
            if label == "Asset Type":
                asset_type = AssetType.parse(value)
                if asset_type is None:
                    raise ValueError(f"Unknown asset type: {value!r}")
                value = asset_type.value
            values[EDITABLE_FIELDS[label]] = value

        def change(asset):
            for column, value in values.items():
                setattr(asset, column, value)
            return True

        return self._update(asset_id, "Field edit", change)

    def delete_asset(self, asset_id):
        session = self.get_session()
        try:
            asset = session.get(Asset, asset_id)
            if not asset:
                logger.warning("Delete ignored: asset %s not found", asset_id)
                return False
            session.delete(asset)
            session.commit()
            logger.info("Deleted asset %s", asset_id)
            return True
        except SQLAlchemyError:
            logger.exception("Delete failed for asset %s", asset_id)
            session.rollback()
            return False
        finally:
            session.close()

    def get_asset_by_id(self, asset_id):
        session = self.get_session()
        asset = session.get(Asset, asset_id)
        result = asset.to_dict() if asset else None
        session.close()
        return result

    def list_assets(self):
        session = self.get_session()
        assets = session.query(Asset).order_by(Asset.id).all()
        results = [a.to_dict() for a in assets]
        session.close()
        return results

    def count(self):
        session = self.get_session()
        total = session.query(Asset).count()
        session.close()
        return total

    def get_distinct_values(self):
        """Distinct filter choices per field, ordered by first appearance."""
        session = self.get_session()
        values = {}
        for label, column in DISTINCT_FIELDS.items():
            rows = (
                session.query(column)
                .filter(column.isnot(None))
                .group_by(column)
                .order_by(func.min(Asset.id))
                .all()
            )
            values[label] = [r[0] for r in rows]
        session.close()
        return values
