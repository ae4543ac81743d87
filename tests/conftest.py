"""Shared fixtures: small C# sources and a sample project on disk."""

from __future__ import annotations

from pathlib import Path

import pytest

CALCULATOR_SOURCE = """\
using System;
using System.Collections.Generic;

namespace MyApp.Models
{
    /// <summary>
    /// Simple arithmetic.
    /// </summary>
    public class Calculator
    {
        public int Add(int a, int b)
        {
            return a + b;
        }

        public string Process(string data)
        {
            if (data == null || data.Length == 0)
            {
                throw new ArgumentNullException(nameof(data));
            }
            return data.Trim();
        }

        private void Reset()
        {
        }

        public int Total { get; set; }
    }
}
"""

ORDER_SERVICE_SOURCE = """\
using System;
using System.Threading.Tasks;

namespace MyApp.Services;

public class Order
{
    public int Id { get; set; }
}

public interface IOrderRepository
{
    Task<Order> GetByIdAsync(int id);
}

public class OrderService
{
    private readonly IOrderRepository _repository;

    public OrderService(IOrderRepository repository)
    {
        _repository = repository ?? throw new ArgumentNullException(nameof(repository));
    }

    public async Task<Order> GetOrderAsync(int id)
    {
        if (id <= 0)
        {
            throw new ArgumentOutOfRangeException(nameof(id));
        }
        return await _repository.GetByIdAsync(id);
    }
}
"""

CONTROLLER_SOURCE = """\
using Microsoft.AspNetCore.Mvc;

namespace MyApp.Controllers;

[ApiController]
[Route("api/[controller]")]
public class OrdersController : ControllerBase
{
    private readonly IOrderService _service;

    public OrdersController(IOrderService service)
    {
        _service = service;
    }

    [HttpGet("{id}")]
    public async Task<IActionResult> Get(int id)
    {
        return Ok(await _service.GetAsync(id));
    }
}
"""

PROJECT_FILE = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <OutputType>Library</OutputType>
  </PropertyGroup>
  <ItemGroup>
    <PackageReference Include="Newtonsoft.Json" Version="13.0.3" />
    <PackageReference Include="xunit" Version="2.6.1" />
    <PackageReference Include="Moq" Version="4.20.69" />
    <PackageReference Include="FluentAssertions" Version="6.12.0" />
  </ItemGroup>
  <ItemGroup>
    <ProjectReference Include="..\\Core\\Core.csproj" />
  </ItemGroup>
</Project>
"""


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A project with a model and a service, referencing xunit and Moq."""
    project = tmp_path / "MyApp"
    (project / "Models").mkdir(parents=True)
    (project / "Services").mkdir()
    (project / "MyApp.csproj").write_text(PROJECT_FILE, encoding="utf-8")
    (project / "Models" / "Calculator.cs").write_text(CALCULATOR_SOURCE, encoding="utf-8")
    (project / "Services" / "OrderService.cs").write_text(ORDER_SERVICE_SOURCE, encoding="utf-8")
    return project
