import pytest
from fastapi.testclient import TestClient

from carsql.data.store import CarStore
from carsql.main import create_app


HEADER = "year,make,model,trim,body,transmission,vin,state,condition,odometer,color,interior,seller,mmr,sellingprice,saledate"
SALEDATE = "Tue Dec 16 2014 12:30:00 GMT-0800 (PST)"

# Lines 2-12 of the sample file. Line 9 is short and line 10 is long; both
# are rejected. Ford has one empty and one non-numeric price (both NULL).
# BMW's two sales tie for the make maximum. Honda has no body.
SAMPLE_ROWS = [
    f"2015,Toyota,Camry,LE,Sedan,automatic,vin001,ca,4.5,16639,white,black,seller a,20500,22000,{SALEDATE}",
    f"2018,Toyota,Corolla,L,Sedan,automatic,vin002,ca,4.0,5000,black,gray,seller b,17500,18000,{SALEDATE}",
    f"2016,BMW,3 Series,328i,Sedan,automatic,vin003,fl,4.8,9000,blue,black,seller c,29000,30000,{SALEDATE}",
    f"2016,BMW,X5,xDrive35i,SUV,automatic,vin004,tx,3.9,42000,black,black,seller d,29500,30000,{SALEDATE}",
    f"2014,Ford,F-150,XLT,Pickup,,vin005,tx,3.0,80000,red,gray,seller e,15000,,{SALEDATE}",
    f"2014,Ford,Focus,SE,Sedan,manual,vin006,mi,2.5,95000,silver,black,seller f,6000,abc,{SALEDATE}",
    f"2013,Ford,Fusion,S,Sedan,automatic,vin007,mi,3.2,60000,gray,beige,seller g,9000,9500,{SALEDATE}",
    "2012,Kia,Rio",
    f"2012,Kia,Rio,LX,Sedan,automatic,vin008,ga,2.0,70000,white,black,seller x,5000,4800,{SALEDATE},extra",
    f"2017,Kia,Optima,LX,Sedan,automatic,vin009,ga,4.1,20000,white,black,seller h,14000,13500,{SALEDATE}",
    f"2017,Honda,Civic,EX,,automatic,vin010,ca,3.5,30000,blue,black,seller i,12000,12500,{SALEDATE}",
]

VALID_PRICES = [22000, 18000, 30000, 30000, 9500, 13500, 12500]

EXAMPLE_ROWS = [
    f"2015,Toyota,Camry,LE,Sedan,automatic,vin101,ca,4.5,16000,white,black,seller a,21000,22000,{SALEDATE}",
    f"2018,Toyota,Corolla,L,Sedan,automatic,vin102,ca,4.0,5000,black,gray,seller b,17500,18000,{SALEDATE}",
    f"2016,BMW,3-Series,328i,Sedan,automatic,vin103,fl,4.8,9000,blue,black,seller c,29000,30000,{SALEDATE}",
]


def _write_csv(path, rows):
    path.write_text("\n".join([HEADER, *rows]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_csv(tmp_path):
    return _write_csv(tmp_path / "car_prices.csv", SAMPLE_ROWS)


@pytest.fixture
def example_csv(tmp_path):
    return _write_csv(tmp_path / "example.csv", EXAMPLE_ROWS)


@pytest.fixture
def store(tmp_path, sample_csv):
    s = CarStore(tmp_path / "cars.db").load(sample_csv)
    yield s
    s.close()


@pytest.fixture
def empty_store(tmp_path):
    s = CarStore(tmp_path / "empty.db")
    yield s
    s.close()


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c
