import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from shooting_eda.cleaning import clean_dataframe

RAW_COLUMNS = [
    "INCIDENT_KEY",
    "OCCUR_DATE",
    "OCCUR_TIME",
    "BORO",
    "LOC_OF_OCCUR_DESC",
    "PRECINCT",
    "JURISDICTION_CODE",
    "LOC_CLASSFCTN_DESC",
    "LOCATION_DESC",
    "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP",
    "PERP_SEX",
    "PERP_RACE",
    "VIC_AGE_GROUP",
    "VIC_SEX",
    "VIC_RACE",
    "X_COORD_CD",
    "Y_COORD_CD",
    "Latitude",
    "Longitude",
    "Lon_Lat",
]


def make_row(**overrides):
    row = {
        "INCIDENT_KEY": "100",
        "OCCUR_DATE": "01/02/2020",
        "OCCUR_TIME": "23:10:00",
        "BORO": "BRONX",
        "LOC_OF_OCCUR_DESC": "",
        "PRECINCT": "44",
        "JURISDICTION_CODE": "0",
        "LOC_CLASSFCTN_DESC": "",
        "LOCATION_DESC": "",
        "STATISTICAL_MURDER_FLAG": "false",
        "PERP_AGE_GROUP": "25-44",
        "PERP_SEX": "M",
        "PERP_RACE": "BLACK",
        "VIC_AGE_GROUP": "18-24",
        "VIC_SEX": "M",
        "VIC_RACE": "BLACK",
        "X_COORD_CD": "1007000",
        "Y_COORD_CD": "250000",
        "Latitude": "40.84",
        "Longitude": "-73.91",
        "Lon_Lat": "POINT (-73.91 40.84)",
    }
    row.update(overrides)
    return row


@pytest.fixture
def raw_df():
    rows = [
        make_row(INCIDENT_KEY="1", STATISTICAL_MURDER_FLAG="true"),
        make_row(INCIDENT_KEY="2", VIC_SEX="F"),
        make_row(
            INCIDENT_KEY="3",
            OCCUR_DATE="03/15/2021",
            OCCUR_TIME="01:05:00",
            BORO="BROOKLYN",
            PRECINCT="75",
            PERP_AGE_GROUP="",
            PERP_SEX="",
            PERP_RACE="",
            VIC_AGE_GROUP="25-44",
        ),
        make_row(
            INCIDENT_KEY="4",
            OCCUR_DATE="07/04/2021",
            OCCUR_TIME="20:45:00",
            BORO="QUEENS",
            PRECINCT="103",
            STATISTICAL_MURDER_FLAG="true",
            PERP_AGE_GROUP="UNKNOWN",
            PERP_SEX="U",
            PERP_RACE="UNKNOWN",
            VIC_SEX="U",
            LOCATION_DESC="GROCERY/BODEGA",
        ),
        make_row(
            INCIDENT_KEY="5",
            OCCUR_DATE="12/31/2021",
            OCCUR_TIME="12:00:00",
            BORO="MANHATTAN",
            PRECINCT="25",
            STATISTICAL_MURDER_FLAG="",
            PERP_AGE_GROUP="1020",
        ),
        make_row(
            INCIDENT_KEY="6",
            OCCUR_DATE="not a date",
            OCCUR_TIME="99:99:99",
            BORO="BROOKLYN",
            PRECINCT="75",
            VIC_RACE="",
        ),
    ]
    return pd.DataFrame(rows, columns=RAW_COLUMNS)


@pytest.fixture
def clean_df(raw_df):
    return clean_dataframe(raw_df)
