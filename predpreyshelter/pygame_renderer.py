from __future__ import annotations

from dataclasses import dataclass

import pygame

from predpreyshelter.simulation import GridSnapshot, TickReport
from predpreyshelter.species import Age, Species
from predpreyshelter.vegetation import THICK_MAX_QUANTITY


@dataclass
class GuiStyle:
    margin: int = 10
    panel_width: int = 240
    panel_padding: int = 12
    background_color: tuple = (245, 245, 245)
    panel_background: tuple = (235, 235, 235)
    grid_color: tuple = (210, 210, 210)
    predator_color: tuple = (220, 90, 30)
    prey_color: tuple = (150, 150, 160)
    corpse_color: tuple = (90, 60, 40)
    grass_color: tuple = (120, 200, 90)
    thick_color: tuple = (30, 110, 40)
    rabbit_shelter_color: tuple = (200, 170, 120)
    fox_shelter_color: tuple = (120, 70, 40)
    text_color: tuple = (20, 20, 20)
    line_predator: tuple = (220, 90, 30)
    line_prey: tuple = (110, 110, 130)


class PyGameRenderer:
    """Draws a `GridSnapshot` after every tick: vegetation, shelters, animals and a population panel."""

    def __init__(self, size: int, cell_size: int = 24, fps: int = 10):
        self.size = size
        self.cell_size = cell_size
        self.fps = fps
        self.style = GuiStyle()

        window_width = self.style.margin * 2 + size * cell_size + self.style.panel_width
        window_height = self.style.margin * 2 + size * cell_size + 24
        pygame.init()
        self.screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Rabbits, foxes and shelters")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, max(12, int(cell_size * 0.9)))
        self.small_font = pygame.font.SysFont(None, max(12, int(cell_size * 0.75)))

        self.history_steps = []
        self.history_prey = []
        self.history_pred = []
        self.history_max = 200

    def close(self) -> None:
        pygame.quit()

    def update(self, snapshot: GridSnapshot, report: TickReport | None = None) -> bool:
        """Returns False once the window was closed."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

        self.screen.fill(self.style.background_color)
        self._draw_cells(snapshot)
        self._draw_grid()
        self._draw_animals(snapshot)
        prey, pred = self._count(snapshot)
        self._draw_text(snapshot.tick, prey, pred)
        self._draw_panel(snapshot.tick, prey, pred, report)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def _cell_rect(self, view) -> pygame.Rect:
        return pygame.Rect(
            self.style.margin + (view.coordinates.x - 1) * self.cell_size,
            self.style.margin + (view.coordinates.y - 1) * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    @staticmethod
    def _count(snapshot: GridSnapshot):
        prey = pred = 0
        for view in snapshot.cells:
            if view.occupant_species is not None and view.occupant_alive:
                if view.occupant_species == Species.PREY.value:
                    prey += 1
                else:
                    pred += 1
            if view.shelter_species == Species.PREY.value:
                prey += view.shelter_members
            elif view.shelter_species == Species.PREDATOR.value:
                pred += view.shelter_members
        return prey, pred

    def _draw_grid(self) -> None:
        extent = self.size * self.cell_size
        for i in range(self.size + 1):
            offset = self.style.margin + i * self.cell_size
            pygame.draw.line(
                self.screen, self.style.grid_color,
                (offset, self.style.margin), (offset, self.style.margin + extent), 1,
            )
            pygame.draw.line(
                self.screen, self.style.grid_color,
                (self.style.margin, offset), (self.style.margin + extent, offset), 1,
            )

    def _draw_cells(self, snapshot: GridSnapshot) -> None:
        for view in snapshot.cells:
            rect = self._cell_rect(view)
            if view.shelter_species is not None:
                color = (
                    self.style.rabbit_shelter_color
                    if view.shelter_species == Species.PREY.value
                    else self.style.fox_shelter_color
                )
                pygame.draw.rect(self.screen, color, rect)
                if view.shelter_members:
                    label = self.small_font.render(str(view.shelter_members), True, self.style.background_color)
                    self.screen.blit(label, label.get_rect(center=rect.center))
                continue
            if view.vegetation is None or view.vegetation_quantity <= 0:
                continue
            base = self.style.thick_color if view.vegetation == "thick" else self.style.grass_color
            intensity = 0.4 + 0.6 * min(view.vegetation_quantity / THICK_MAX_QUANTITY, 1.0)
            pygame.draw.rect(self.screen, tuple(int(c * intensity) for c in base), rect)

    def _draw_animals(self, snapshot: GridSnapshot) -> None:
        for view in snapshot.cells:
            if view.occupant_species is None:
                continue
            rect = self._cell_rect(view)
            if not view.occupant_alive:
                color = self.style.corpse_color
            elif view.occupant_species == Species.PREDATOR.value:
                color = self.style.predator_color
            else:
                color = self.style.prey_color
            radius = max(2, self.cell_size // 2 - 2)
            if view.occupant_age == Age.CHILD.value:
                radius = max(2, radius // 2)
            pygame.draw.circle(self.screen, color, rect.center, radius)
            if view.occupant_age == Age.SENIOR.value:
                pygame.draw.circle(self.screen, self.style.text_color, rect.center, radius, 1)

    def _draw_text(self, step: int, prey: int, pred: int) -> None:
        surface = self.font.render(f"t={step} rabbits={prey} foxes={pred}", True, self.style.text_color)
        self.screen.blit(surface, (self.style.margin, self.style.margin + self.size * self.cell_size + 2))

    def _draw_panel(self, step: int, prey: int, pred: int, report: TickReport | None) -> None:
        panel_x = self.style.margin + self.size * self.cell_size + self.style.margin
        panel_y = self.style.margin
        panel_w = self.style.panel_width - self.style.margin
        panel_h = self.size * self.cell_size
        pygame.draw.rect(self.screen, self.style.panel_background, pygame.Rect(panel_x, panel_y, panel_w, panel_h))

        self._push_history(step, prey, pred)

        y = panel_y + self.style.panel_padding
        y = self._draw_panel_line(panel_x, y, f"Step: {step}")
        y = self._draw_panel_line(panel_x, y, f"Rabbits: {prey}")
        y = self._draw_panel_line(panel_x, y, f"Foxes: {pred}")
        if report is not None:
            y += 6
            y = self._draw_panel_line(panel_x, y, "Last tick:", bold=True)
            y = self._draw_panel_line(panel_x, y, f"  vegetation: {report.grass_quantity}")
            y = self._draw_panel_line(panel_x, y, f"  births: {report.births}")
            y = self._draw_panel_line(panel_x, y, f"  deaths: {report.deaths}")
            y = self._draw_panel_line(panel_x, y, f"  eaten: {report.eaten}")

        spark_h = 90
        spark_y = panel_y + panel_h - spark_h - self.style.panel_padding
        spark_rect = pygame.Rect(panel_x + self.style.panel_padding, spark_y, panel_w - 2 * self.style.panel_padding, spark_h)
        pygame.draw.rect(self.screen, (225, 225, 225), spark_rect)
        self._draw_sparkline(spark_rect)

    def _push_history(self, step: int, prey: int, pred: int) -> None:
        self.history_steps.append(step)
        self.history_prey.append(prey)
        self.history_pred.append(pred)
        if len(self.history_steps) > self.history_max:
            self.history_steps.pop(0)
            self.history_prey.pop(0)
            self.history_pred.pop(0)

    def _draw_panel_line(self, x: int, y: int, text: str, bold: bool = False) -> int:
        font = self.font if bold else self.small_font
        surface = font.render(text, True, self.style.text_color)
        self.screen.blit(surface, (x + self.style.panel_padding, y))
        return y + surface.get_height() + 2

    def _draw_sparkline(self, rect: pygame.Rect) -> None:
        if len(self.history_steps) < 2:
            return
        max_count = max(max(self.history_prey), max(self.history_pred), 1)
        n = len(self.history_steps)
        for series, color in ((self.history_prey, self.style.line_prey), (self.history_pred, self.style.line_predator)):
            for i in range(1, n):
                x0 = rect.x + int((i - 1) / (n - 1) * rect.width)
                x1 = rect.x + int(i / (n - 1) * rect.width)
                y0 = rect.y + rect.height - int(series[i - 1] / max_count * rect.height)
                y1 = rect.y + rect.height - int(series[i] / max_count * rect.height)
                pygame.draw.line(self.screen, color, (x0, y0), (x1, y1), 2)
