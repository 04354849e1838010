# salbp_core/export_pdf.py
from __future__ import annotations
from typing import List
import io
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib import colors
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from .engine import line_metrics, station_load
from .models import Instance, Station

def render_solution_pdf(name: str, instance: Instance, stations: List[Station]) -> bytes:
    buf = io.BytesIO()
    page_size = landscape(letter)
    c = canvas.Canvas(buf, pagesize=page_size)

    m = line_metrics(instance, stations)
    title = f"{name} - {m.actual_stations} stations, cycle time {instance.cycle_time}"
    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, page_size[1] - 40, title)
    c.setFont("Helvetica", 10)
    c.drawString(40, page_size[1] - 58,
                 f"Theoretical minimum {m.min_stations} | efficiency {m.efficiency:.1f}% | idle {m.idle_time}")

    data = [["Station", "Tasks", "Load", "Idle"]]
    for s in stations:
        load = station_load(instance, s)
        data.append([str(s.id), " ".join(s.tasks), str(load), str(instance.cycle_time - load)])

    t = Table(data, repeatRows=1)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.lightgrey),
        ("TEXTCOLOR", (0,0), (-1,0), colors.black),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
        ("ALIGN", (0,0), (-1,-1), "LEFT"),
        ("VALIGN", (0,0), (-1,-1), "MIDDLE"),
    ]))

    table_w, table_h = t.wrapOn(c, page_size[0] - 80, page_size[1] - 100)
    t.drawOn(c, 40, page_size[1] - 80 - table_h)

    c.showPage()
    c.save()
    return buf.getvalue()
