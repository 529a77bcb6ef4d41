#!/usr/bin/env python3
"""
Insert the default service types and tasks into the catalogue.
Safe to run more than once: rows are matched by name.
"""

from poolcare.database import Base, SessionLocal, engine
from poolcare.models import ServiceTask, ServiceType

SERVICE_TYPES = [
    ("Limpeza semanal", "Limpeza completa da piscina toda semana", 60, 180.0, "weekly"),
    ("Limpeza quinzenal", "Limpeza completa a cada duas semanas", 75, 220.0, "bi_weekly"),
    ("Manutenção mensal", "Visita mensal com tratamento químico", 90, 250.0, "monthly"),
    ("Limpeza avulsa", "Visita única, sem recorrência", 120, 300.0, "one_time"),
]

SERVICE_TASKS = [
    ("Aspiração", "Aspirar fundo e paredes", 20, 0.0),
    ("Escovação", "Escovar paredes, bordas e degraus", 15, 0.0),
    ("Peneiração", "Retirar folhas e detritos da superfície", 10, 0.0),
    ("Tratamento químico", "Medir e corrigir pH, cloro e alcalinidade", 15, 40.0),
    ("Limpeza do filtro", "Retrolavagem e limpeza do pré-filtro", 20, 30.0),
    ("Limpeza de bordas", "Remover gordura da linha d'água", 15, 0.0),
]


def seed_catalog():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()

    try:
        print("🔍 Seeding service catalogue...\n")

        existing_types = {name for (name,) in db.query(ServiceType.name).all()}
        for name, description, duration, price, frequency in SERVICE_TYPES:
            if name in existing_types:
                print(f"   ⏭️  Service type '{name}' already exists")
                continue
            db.add(
                ServiceType(
                    name=name,
                    description=description,
                    duration_minutes=duration,
                    price=price,
                    frequency=frequency,
                )
            )
            print(f"   ✅ Service type '{name}'")

        existing_tasks = {name for (name,) in db.query(ServiceTask.name).all()}
        for name, description, duration, price in SERVICE_TASKS:
            if name in existing_tasks:
                print(f"   ⏭️  Service task '{name}' already exists")
                continue
            db.add(ServiceTask(name=name, description=description, duration_minutes=duration, price=price))
            print(f"   ✅ Service task '{name}'")

        db.commit()
        print("\n✅ Catalogue ready")
    except Exception as e:
        print(f"❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_catalog()
