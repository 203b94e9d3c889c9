#!/usr/bin/env python
"""
Simulador da agência.

Este script:
1. Monta o container com os dados iniciais
2. Inicia o painel (anúncio por voz no log + playlist)
3. Emite senhas aleatórias e faz os guichês chamarem,
   rechamarem e finalizarem
4. Mostra um resumo da fila

Uso:
    python scripts/simulate.py
    python scripts/simulate.py --steps 60 --counters 01,02,05 --seed 42
"""

import os
import sys
import argparse
import logging
import random
import time
from collections import Counter

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def build_container(locale: str):
    """Container com configuração padrão (sem Django)."""
    from src.config.container import Container, DEFAULT_QUEUE_CONFIG
    from src.config.seed import seed_defaults

    container = Container()
    config = dict(DEFAULT_QUEUE_CONFIG)
    config['locale'] = locale
    container.config.from_dict(config)

    seed_defaults(container.queue_engine())
    return container


def run_step(engine, rng: random.Random, counters, departments) -> str:
    """Executa uma ação aleatória e descreve o que aconteceu."""
    action = rng.choices(
        ['generate', 'call', 'recall', 'finish'],
        weights=[5, 3, 1, 2],
    )[0]

    if action == 'generate':
        dept = rng.choice(departments)
        sub = rng.choice(dept.sub_categories) if dept.sub_categories else None
        ticket = engine.generate_ticket(
            department_id=dept.id,
            is_priority=rng.random() < 0.2,
            sub_category=sub,
        )
        flag = " (prioridade)" if ticket.is_priority else ""
        return f"🎫 Totem emitiu {ticket.number}{flag}"

    called = [t for t in engine.tickets if t.status == 'CALLED']

    if action == 'call':
        counter = rng.choice(counters)
        ticket = engine.call_next_ticket(counter)
        if ticket is None:
            return f"⏸️  Guichê {counter}: ninguém aguardando"
        return f"📢 Guichê {counter} chamou {ticket.number}"

    if not called:
        return "💤 Nenhuma senha em atendimento"

    ticket = rng.choice(called)
    if action == 'recall':
        engine.recall_ticket(ticket.id)
        return f"🔁 Guichê {ticket.counter} rechamou {ticket.number}"

    engine.finish_ticket(ticket.id)
    return f"✅ Guichê {ticket.counter} finalizou {ticket.number}"


def show_summary(engine):
    snapshot = engine.snapshot()
    by_status = Counter(t.status for t in snapshot.tickets)

    waits = [
        (t.called_at - t.created_at).total_seconds()
        for t in snapshot.tickets
        if t.called_at is not None
    ]

    print("\n" + "=" * 60)
    print("📊 Resumo da Simulação")
    print("=" * 60)
    print(f"  Senhas emitidas: {len(snapshot.tickets)}")
    for status, total in sorted(by_status.items()):
        print(f"    {status}: {total}")
    print(f"  Aguardando: {snapshot.waiting_count}")
    if waits:
        print(f"  Espera média até a chamada: {sum(waits) / len(waits):.2f}s")
    if snapshot.last_called_ticket:
        last = snapshot.last_called_ticket
        print(f"  Em destaque: {last.number} (guichê {last.counter})")
    if snapshot.recent_calls:
        print("  Últimas chamadas: " + ", ".join(t.number for t in snapshot.recent_calls))
    print("=" * 60 + "\n")


def main():
    parser = argparse.ArgumentParser(description='Simulador de fila de atendimento')
    parser.add_argument('--steps', type=int, default=30, help='Número de ações')
    parser.add_argument('--counters', default='01,02,05', help='Guichês separados por vírgula')
    parser.add_argument('--interval', type=float, default=0.3, help='Segundos entre ações')
    parser.add_argument('--seed', type=int, default=None, help='Semente aleatória')
    parser.add_argument('--locale', default='pt-BR', help='Locale do anúncio')
    parser.add_argument('--verbose', action='store_true', help='Log de DEBUG')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='{levelname} {asctime} {module} {message}',
        style='{',
    )

    print("\n" + "=" * 60)
    print("🏦 QueueMaster - Simulador")
    print("=" * 60 + "\n")

    container = build_container(args.locale)
    engine = container.queue_engine()
    panel = container.display_panel()
    panel.start()

    rng = random.Random(args.seed)
    counters = [c.strip() for c in args.counters.split(',') if c.strip()]
    departments = engine.departments

    try:
        for _ in range(args.steps):
            print(run_step(engine, rng, counters, departments))
            time.sleep(args.interval)
    finally:
        panel.stop()

    show_summary(engine)


if __name__ == '__main__':
    main()
