import io

import pandas as pd


def to_excel(rows, columns, sheet_name):
    """Write rows (list of dicts) to an in-memory xlsx workbook.

    columns maps the dict key to the header shown in the sheet.
    """
    df = pd.DataFrame(rows, columns=list(columns.keys()))
    df = df.rename(columns=columns)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

        workbook = writer.book
        worksheet = writer.sheets[sheet_name]
        header_format = workbook.add_format({
            'bold': True,
            'valign': 'top',
            'fg_color': '#D7E4BC',
            'border': 1,
            'align': 'center'
        })
        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_format)
            worksheet.set_column(col_num, col_num, max(12, len(str(value)) + 2))

    output.seek(0)
    return output


XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
