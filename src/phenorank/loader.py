import pathlib

import pandas as pd

# Column aliases → canonical association-table columns
RENAME_MAP = {
    # disease columns
    "disease": "disease_name",
    "disease_curie": "disease_id",
    "inheritance_patterns": "inheritance",
    "gene": "genes",
    # phenotype columns
    "hpo": "hpo_id",
    "hpo_term": "hpo_name",
    "hpo_label": "hpo_name",
    "definition": "hpo_definition",
}

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def load_association_table(table_path: str | pathlib.Path) -> pd.DataFrame:
    """
    Read a disease–phenotype association table into a DataFrame:
      - CSV by default, the first worksheet for Excel workbooks
      - every cell read as a string, blanks as empty strings
      - normalize all headers to snake_case lowercase
      - apply renames from RENAME_MAP
    """
    path = pathlib.Path(table_path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(
            path,
            sheet_name=0,
            header=0,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            engine="openpyxl",
        )
    else:
        df = pd.read_csv(
            path,
            header=0,
            dtype=str,
            skip_blank_lines=True,
            # "NA", "None", "null" are literal values here; only empty cells are missing
            keep_default_na=False,
            na_values=[""],
        )

    # CLEAN & NORMALIZE headers:
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)"
        .str.replace(r"\s+", "_", regex=True)  # spaces → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )

    # apply specific renames (e.g. "hpo" → "hpo_id"), never clobbering a canonical column
    df = df.rename(
        columns={
            orig: target
            for orig, target in RENAME_MAP.items()
            if orig in df.columns and target not in df.columns
        }
    )

    # drop rows that are blank in every column and trim cell whitespace
    df = df.dropna(how="all").fillna("")
    for column in df.columns:
        df[column] = df[column].astype(str).str.strip()
    return df
