# config.py
APP_VERSION = "1.4.0"
APP_TITLE = "Asset Management System"

# Database (in-memory, one per session)
DB_URL = "sqlite://"

# Logging
LOG_LEVEL = "INFO"

# Pagination
PAGE_SIZE = 100

# Defaults for new assets
DEFAULT_LOCATION = "Mumbai Office"
ASSET_TAG_PREFIX = "AST-"

# "legacy" keeps status and employee fields independent, "strict" keeps them in sync
CONSISTENCY_LEGACY = "legacy"
CONSISTENCY_STRICT = "strict"
CONSISTENCY_MODE = CONSISTENCY_LEGACY

# Assigning requires an employee ID as well as a name
REQUIRE_EMPLOYEE_ID = False

# Filter sentinel
FILTER_ALL = "all"

# Column headers
EXPORT_COLUMNS = [
    "Asset ID", "Asset Name", "Asset Type", "Brand", "Configuration",
    "Serial Number", "Employee ID", "Employee Name", "Status",
    "Asset Location", "Assigned Date"
]
TEMPLATE_COLUMNS = [
    "Asset Name", "Asset Type", "Brand", "Model", "Configuration", "Serial Number"
]
REQUIRED_DRAFT_FIELDS = ["Asset Name", "Asset Type", "Brand", "Serial Number"]

EXPORT_FILENAME = "asset_inventory.csv"
TEMPLATE_FILENAME = "asset_template.csv"
IMPORT_EXTENSIONS = [".csv", ".xlsx", ".xls"]

TEMPLATE_SAMPLE_ROWS = [
    ["MacBook Pro 16\"", "Laptop", "Apple", "MacBook Pro M2", "16GB RAM, 512GB SSD", "MBP16-2023-001"],
    ["ThinkPad X1", "Laptop", "Lenovo", "ThinkPad X1 Carbon", "16GB RAM, 1TB SSD", "TPX1-2023-002"],
    ["iPad Pro", "Tablet", "Apple", "iPad Pro 12.9", "256GB, Wi-Fi + Cellular", "IPD-2023-003"],
]

# Session seed
SEED_ASSETS = [
    {
        "Asset Name": "MacBook Pro 16\"", "Asset Type": "Laptop", "Brand": "Apple",
        "Model": "MacBook Pro M2", "Configuration": "16GB RAM, 512GB SSD",
        "Serial Number": "MBP16-2023-001", "Employee ID": "EMP-1001",
        "Employee Name": "John Doe", "Status": "Assigned",
        "Asset Location": "Mumbai Office", "Assigned Date": "2024-01-15",
    },
    {
        "Asset Name": "ThinkPad X1", "Asset Type": "Laptop", "Brand": "Lenovo",
        "Model": "ThinkPad X1 Carbon", "Configuration": "16GB RAM, 1TB SSD",
        "Serial Number": "TPX1-2023-002", "Employee ID": None,
        "Employee Name": None, "Status": "Available",
        "Asset Location": "Hyderabad WH", "Assigned Date": None,
    },
    {
        "Asset Name": "iPad Pro", "Asset Type": "Tablet", "Brand": "Apple",
        "Model": "iPad Pro 12.9", "Configuration": "256GB, Wi-Fi + Cellular",
        "Serial Number": "IPD-2023-003", "Employee ID": "EMP-1002",
        "Employee Name": "Jane Smith", "Status": "Assigned",
        "Asset Location": "Bangalore Office", "Assigned Date": "2024-01-20",
    },
    {
        "Asset Name": "Surface Pro", "Asset Type": "Tablet", "Brand": "Microsoft",
        "Model": "Surface Pro 9", "Configuration": "16GB RAM, 512GB SSD",
        "Serial Number": "SPR-2023-004", "Employee ID": None,
        "Employee Name": None, "Status": "Available",
        "Asset Location": "Gurugram Office", "Assigned Date": None,
    },
    {
        "Asset Name": "Dell XPS 13", "Asset Type": "Laptop", "Brand": "Dell",
        "Model": "XPS 13 Plus", "Configuration": "32GB RAM, 1TB SSD",
        "Serial Number": "DXP-2023-005", "Employee ID": "EMP-1003",
        "Employee Name": "Mike Johnson", "Status": "Assigned",
        "Asset Location": "Mumbai Office", "Assigned Date": "2024-02-01",
    },
    {
        "Asset Name": "Galaxy Tab S9", "Asset Type": "Tablet", "Brand": "Samsung",
        "Model": "Galaxy Tab S9 Ultra", "Configuration": "512GB, 5G",
        "Serial Number": "GTS-2023-006", "Employee ID": "EMP-1004",
        "Employee Name": "Sarah Wilson", "Status": "Scrap/Damage",
        "Asset Location": "Bhiwandi WH", "Assigned Date": "2024-02-05",
    },
]
